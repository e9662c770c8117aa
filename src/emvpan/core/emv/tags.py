"""EMV data element tags used by the card read sequence."""

from emvpan.core.base.tags import TAG_NAMES

APPLICATION_ID = 0x4F
APPLICATION_LABEL = 0x50
PDOL = 0x9F38
AFL = 0x94
PAN = 0x5A
EXPIRATION_DATE = 0x5F24
CARDHOLDER_NAME = 0x5F20
PAN_SEQUENCE_NUMBER = 0x5F34
APPLICATION_CURRENCY_CODE = 0x9F42
LANGUAGE_PREFERENCE = 0x5F2D
AIP = 0x82
RESPONSE_TEMPLATE_1 = 0x80
RESPONSE_TEMPLATE_2 = 0x77

# Terminal-supplied PDOL data
TTQ = 0x9F66
AMOUNT_AUTHORIZED = 0x9F02
UNPREDICTABLE_NUMBER = 0x9F37
TRANSACTION_CURRENCY_CODE = 0x5F2A
TERMINAL_COUNTRY_CODE = 0x9F1A
COMMAND_TEMPLATE = 0x83

EMV_TAG_NAMES: dict[int, str] = {
    **TAG_NAMES,
    APPLICATION_ID: "Application Identifier",
    APPLICATION_LABEL: "Application Label",
    PDOL: "PDOL",
    AFL: "Application File Locator",
    PAN: "PAN",
    EXPIRATION_DATE: "Expiration Date",
    CARDHOLDER_NAME: "Cardholder Name",
    PAN_SEQUENCE_NUMBER: "PAN Sequence Number",
    APPLICATION_CURRENCY_CODE: "Application Currency Code",
    LANGUAGE_PREFERENCE: "Language Preference",
    AIP: "Application Interchange Profile",
    RESPONSE_TEMPLATE_1: "Response Message Template Format 1",
    RESPONSE_TEMPLATE_2: "Response Message Template Format 2",
    TTQ: "Terminal Transaction Qualifiers",
    AMOUNT_AUTHORIZED: "Amount, Authorised",
    UNPREDICTABLE_NUMBER: "Unpredictable Number",
    TRANSACTION_CURRENCY_CODE: "Transaction Currency Code",
    TERMINAL_COUNTRY_CODE: "Terminal Country Code",
    COMMAND_TEMPLATE: "Command Template",
}
