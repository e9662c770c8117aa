# filename : scripts.py
# created  : 10/19/2026


import logging

import click

from emvpan.core.smartcard.logging import PROTOCOL, TRACE

lg = logging.getLogger(__name__)


@click.command()
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (show raw APDUs).")
@click.option("-r", "--reader", default=None, help="Use the first reader whose name contains this.")
@click.option(
    "-c",
    "--config",
    "config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON settings file.",
)
@click.option("--ttq", default=None, help="Terminal Transaction Qualifiers (hex).")
@click.option("--currency", type=int, default=None, help="Transaction currency code (ISO 4217 numeric).")
@click.option("--country", type=int, default=None, help="Terminal country code (ISO 3166 numeric).")
@click.option("--amount", type=int, default=None, help="Amount authorised, minor units.")
@click.option("-n", "--count", type=click.IntRange(min=1), default=None, help="Stop after this many cards.")
@click.option("--max-failures", type=click.IntRange(min=1), default=None, help="Consecutive transport failures before giving up.")
@click.option("--delay", type=float, default=None, help="Initial back-off after a transport failure (seconds).")
@click.option("--poll-timeout", type=float, default=None, help="Card wait timeout per poll (seconds).")
@click.option("--mask", is_flag=True, help="Print only the last four PAN digits.")
@click.option("--json", "as_json", is_flag=True, help="Print one JSON object per card.")
def emvpan(verbose, reader, config, ttq, currency, country, amount, count,
           max_failures, delay, poll_timeout, mask, as_json):

    logging.basicConfig(
        level=TRACE if verbose else PROTOCOL,
        format="%(levelname)-8s %(name)s: %(message)s",
    )

    from emvpan.app.config import load_config
    from emvpan.core.smartcard import TransportError

    try:
        settings = load_config(
            config,
            ttq=ttq,
            currency_code=currency,
            country_code=country,
            amount=amount,
            max_failures=max_failures,
            initial_delay=delay,
            poll_timeout=poll_timeout,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    from emvpan.app.main import main
    try:
        main(settings, reader=reader, count=count, mask=mask, as_json=as_json)
    except TransportError as exc:
        raise click.ClickException(str(exc)) from exc
