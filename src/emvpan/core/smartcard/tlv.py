from __future__ import annotations

from dataclasses import dataclass, field

from emvpan.core.smartcard.errors import NotFound, ProtocolError

# Deepest nesting of constructed nodes accepted from a card.
MAX_DEPTH = 16


@dataclass
class TLV:
    """A single BER-TLV node."""

    tag: int
    value: bytes = b""
    children: list[TLV] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.value)

    @property
    def constructed(self) -> bool:
        """Whether this TLV has a constructed (non-primitive) tag."""
        return bool(encode_tag(self.tag)[0] & 0x20)

    def to_bytes(self) -> bytes:
        return encode(self)

    def format(self, tag_names: dict[int, str] | None = None, indent: int = 0) -> str:
        """Format this TLV node as a human-readable tree."""
        names = tag_names or {}
        tag_hex = encode_tag(self.tag).hex().upper()
        name = names.get(self.tag, "")
        prefix = "  " * indent
        if self.children:
            label = f"{prefix}{tag_hex} {name}".rstrip()
            lines = [label]
            for child in self.children:
                lines.append(child.format(names, indent + 1))
            return "\n".join(lines)
        return f"{prefix}{tag_hex} {name}: {self.value.hex(' ').upper()}".rstrip()

    def __repr__(self) -> str:
        tag_hex = encode_tag(self.tag).hex().upper()
        if self.children:
            kids = ", ".join(repr(c) for c in self.children)
            return f"TLV({tag_hex}, [{kids}])"
        return f"TLV({tag_hex}, {self.value.hex().upper()})"


def parse(data: bytes, max_depth: int = MAX_DEPTH) -> list[TLV]:
    """Parse a byte sequence into a list of BER-TLV nodes.

    Constructed values are decoded into ``children`` down to *max_depth*
    levels; anything deeper raises ProtocolError.
    """
    return _parse(data, 0, max_depth)


def decode_all(data: bytes) -> list[TLV]:
    """Parse top-level records only; constructed values are not descended into."""
    nodes: list[TLV] = []
    offset = 0
    while True:
        node, offset = _read_node(data, offset)
        if node is None:
            return nodes
        nodes.append(node)


def _parse(data: bytes, depth: int, max_depth: int) -> list[TLV]:
    nodes: list[TLV] = []
    offset = 0
    while True:
        node, offset = _read_node(data, offset)
        if node is None:
            return nodes
        if node.constructed and node.value:
            if depth >= max_depth:
                raise ProtocolError(f"TLV nesting deeper than {max_depth}")
            node.children = _parse(node.value, depth + 1, max_depth)
        nodes.append(node)


def find(tag: int, data: bytes, max_depth: int = MAX_DEPTH) -> TLV:
    """Find the first node with *tag* anywhere in *data* (depth-first).

    A constructed node's value is searched before its next sibling. The
    returned node carries its raw value only.
    """
    # (buffer, offset of next sibling, nesting level)
    stack: list[tuple[bytes, int, int]] = [(data, 0, 0)]
    while stack:
        buf, offset, depth = stack.pop()
        node, offset = _read_node(buf, offset)
        if node is None:
            continue
        if node.tag == tag:
            return node
        stack.append((buf, offset, depth))
        if node.constructed and node.value:
            if depth >= max_depth:
                raise ProtocolError(f"TLV nesting deeper than {max_depth}")
            stack.append((node.value, 0, depth + 1))
    raise NotFound(tag)


def encode(node: TLV) -> bytes:
    """Serialize a node: tag, minimal length, value.

    A node without a raw value is serialized from its children.
    """
    value = node.value
    if not value and node.children:
        value = b"".join(encode(child) for child in node.children)
    return encode_tag(node.tag) + encode_length(len(value)) + value


def encode_tag(tag: int) -> bytes:
    return tag.to_bytes(max(1, (tag.bit_length() + 7) // 8), "big")


def encode_length(length: int) -> bytes:
    if length < 0x80:
        return bytes([length])
    raw = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(raw)]) + raw


def parse_dol(data: bytes) -> list[tuple[int, int]]:
    """Parse a Data Object List into (tag, length) pairs, in order."""
    entries: list[tuple[int, int]] = []
    offset = 0
    while offset < len(data):
        tag, offset = read_tag(data, offset)
        length, offset = read_length(data, offset)
        entries.append((tag, length))
    return entries


def _read_node(data: bytes, offset: int) -> tuple[TLV | None, int]:
    """Read the node at *offset*, skipping 00/FF padding. None at end of data."""
    while offset < len(data) and data[offset] in (0x00, 0xFF):
        offset += 1
    if offset >= len(data):
        return None, offset
    tag, offset = read_tag(data, offset)
    length, offset = read_length(data, offset)
    end = offset + length
    if end > len(data):
        raise ProtocolError(
            f"TLV {tag:02X} length {length} exceeds remaining {len(data) - offset} bytes"
        )
    return TLV(tag=tag, value=bytes(data[offset:end])), end


def read_tag(data: bytes, offset: int) -> tuple[int, int]:
    """Read a BER-TLV tag and return (tag, new_offset)."""
    if offset >= len(data):
        raise ProtocolError("truncated TLV tag")
    b = data[offset]
    offset += 1
    tag = b
    if (b & 0x1F) == 0x1F:
        while True:
            if offset >= len(data):
                raise ProtocolError("truncated multi-byte TLV tag")
            b = data[offset]
            tag = (tag << 8) | b
            offset += 1
            if not (b & 0x80):
                break
    return tag, offset


def read_length(data: bytes, offset: int) -> tuple[int, int]:
    """Read a BER-TLV length and return (length, new_offset)."""
    if offset >= len(data):
        raise ProtocolError("truncated TLV length")
    b = data[offset]
    offset += 1
    if b < 0x80:
        return b, offset
    num_bytes = b & 0x7F
    if num_bytes == 0:
        raise ProtocolError("indefinite TLV length not supported")
    if offset + num_bytes > len(data):
        raise ProtocolError("truncated long-form TLV length")
    length = int.from_bytes(data[offset : offset + num_bytes], "big")
    return length, offset + num_bytes
