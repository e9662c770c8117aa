"""ISO 7816-4 common TLV tags."""

# FCI (File Control Information)
FCI_TEMPLATE = 0x6F
DF_NAME = 0x84
FCI_PROPRIETARY = 0xA5
FCI_ISSUER_DISCRETIONARY = 0xBF0C

# Record templates
RECORD_TEMPLATE = 0x70
DIRECTORY_ENTRY = 0x61

TAG_NAMES: dict[int, str] = {
    FCI_TEMPLATE: "FCI Template",
    DF_NAME: "DF Name",
    FCI_PROPRIETARY: "FCI Proprietary Template",
    FCI_ISSUER_DISCRETIONARY: "FCI Issuer Discretionary Data",
    RECORD_TEMPLATE: "Record Template",
    DIRECTORY_ENTRY: "Directory Entry",
}
