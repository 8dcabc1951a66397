"""Rail, ACH, and selection classification enums.

These enums define the five payment rails, the NACHA transaction and
SEC codes the codec understands, the return reason codes an RDFI sends
back, and the selection vocabulary used by RailSelector.
"""

from __future__ import annotations

from enum import StrEnum


class RailType(StrEnum):
    """Money-movement channels."""

    ACH = "ach"
    WIRE = "wire"
    CHECK = "check"
    RTGS = "rtgs"
    VIRTUAL_CARD = "virtual_card"

    @property
    def label(self) -> str:
        return _RAIL_LABELS[self]


_RAIL_LABELS: dict[RailType, str] = {
    RailType.ACH: "ACH",
    RailType.WIRE: "Wire",
    RailType.CHECK: "Check",
    RailType.RTGS: "RTGS",
    RailType.VIRTUAL_CARD: "Virtual Card",
}


class AccountType(StrEnum):
    """Receiver account types for ACH entries."""

    CHECKING = "checking"
    SAVINGS = "savings"


class SecCode(StrEnum):
    """Standard Entry Class codes accepted in a batch header.

    Only format validity is enforced; per-code business rules are out of scope.
    """

    PPD = "PPD"
    CCD = "CCD"
    CTX = "CTX"
    WEB = "WEB"
    TEL = "TEL"
    IAT = "IAT"
    ARC = "ARC"
    BOC = "BOC"
    POP = "POP"
    RCK = "RCK"

    @property
    def is_consumer(self) -> bool:
        return self in {SecCode.PPD, SecCode.WEB, SecCode.TEL}

    @property
    def is_corporate(self) -> bool:
        return self in {SecCode.CCD, SecCode.CTX}


class TransactionCode(StrEnum):
    """Two-digit entry detail transaction codes.

    Checking codes live in the 2x range, savings codes in the 3x range.
    The second digit encodes direction: 2-4 credit, 7-9 debit, where 3/8
    are prenotes and 4/9 are zero-dollar remittance entries.
    """

    CHECKING_CREDIT = "22"
    CHECKING_CREDIT_PRENOTE = "23"
    CHECKING_CREDIT_ZERO = "24"
    CHECKING_DEBIT = "27"
    CHECKING_DEBIT_PRENOTE = "28"
    CHECKING_DEBIT_ZERO = "29"
    SAVINGS_CREDIT = "32"
    SAVINGS_CREDIT_PRENOTE = "33"
    SAVINGS_CREDIT_ZERO = "34"
    SAVINGS_DEBIT = "37"
    SAVINGS_DEBIT_PRENOTE = "38"
    SAVINGS_DEBIT_ZERO = "39"

    @property
    def is_credit(self) -> bool:
        return self.value[1] in "234"

    @property
    def is_debit(self) -> bool:
        return self.value[1] in "789"

    @property
    def is_prenote(self) -> bool:
        return self.value[1] in "38"

    @property
    def is_zero_dollar(self) -> bool:
        return self.value[1] in "49"

    @property
    def requires_zero_amount(self) -> bool:
        return self.is_prenote or self.is_zero_dollar

    @property
    def account_type(self) -> AccountType:
        return AccountType.SAVINGS if self.value[0] == "3" else AccountType.CHECKING

    @classmethod
    def for_entry(
        cls,
        account_type: AccountType,
        *,
        debit: bool,
        prenote: bool = False,
    ) -> TransactionCode:
        """Pick the code for an account type, direction, and prenote flag."""
        first = "3" if account_type is AccountType.SAVINGS else "2"
        if debit:
            second = "8" if prenote else "7"
        else:
            second = "3" if prenote else "2"
        return cls(first + second)


class AchReturnCode(StrEnum):
    """Return reason codes an RDFI attaches to a returned ACH entry.

    R01-R04 are administrative, R61-R69 cover returns of returns, and
    R70-R85 cover dishonored returns and IAT problems.
    """

    R01 = "R01"
    R02 = "R02"
    R03 = "R03"
    R04 = "R04"
    R05 = "R05"
    R06 = "R06"
    R07 = "R07"
    R08 = "R08"
    R09 = "R09"
    R10 = "R10"
    R11 = "R11"
    R12 = "R12"
    R13 = "R13"
    R14 = "R14"
    R15 = "R15"
    R16 = "R16"
    R17 = "R17"
    R20 = "R20"
    R21 = "R21"
    R22 = "R22"
    R23 = "R23"
    R24 = "R24"
    R25 = "R25"
    R26 = "R26"
    R27 = "R27"
    R28 = "R28"
    R29 = "R29"
    R30 = "R30"
    R31 = "R31"
    R32 = "R32"
    R33 = "R33"
    R34 = "R34"
    R35 = "R35"
    R36 = "R36"
    R37 = "R37"
    R38 = "R38"
    R39 = "R39"
    R61 = "R61"
    R62 = "R62"
    R63 = "R63"
    R64 = "R64"
    R65 = "R65"
    R66 = "R66"
    R67 = "R67"
    R68 = "R68"
    R69 = "R69"
    R70 = "R70"
    R71 = "R71"
    R72 = "R72"
    R73 = "R73"
    R74 = "R74"
    R75 = "R75"
    R76 = "R76"
    R80 = "R80"
    R81 = "R81"
    R82 = "R82"
    R83 = "R83"
    R84 = "R84"
    R85 = "R85"

    @property
    def description(self) -> str:
        return _RETURN_DESCRIPTIONS[self.value]

    @property
    def is_administrative(self) -> bool:
        return self.value in {"R01", "R02", "R03", "R04"}

    @property
    def is_insufficient_funds(self) -> bool:
        return self.value in _NSF_RETURNS

    @property
    def is_authorization_issue(self) -> bool:
        return self.value in _AUTHORIZATION_RETURNS

    @property
    def requires_account_update(self) -> bool:
        return self.value in {"R02", "R03", "R04", "R12"}

    @property
    def is_retriable(self) -> bool:
        """Only funds-related returns may be re-presented."""
        return self.value in _NSF_RETURNS

    @property
    def suggested_action(self) -> str:
        return _RETURN_ACTIONS.get(
            self.value, "Review and resolve based on specific circumstances"
        )


_NSF_RETURNS = frozenset({"R01", "R09"})
_AUTHORIZATION_RETURNS = frozenset({"R05", "R07", "R08", "R10", "R29"})

_RETURN_DESCRIPTIONS: dict[str, str] = {
    "R01": "Insufficient Funds",
    "R02": "Account Closed",
    "R03": "No Account/Unable to Locate Account",
    "R04": "Invalid Account Number Structure",
    "R05": "Unauthorized Debit to Consumer Account Using Corporate SEC Code",
    "R06": "Returned per ODFI's Request",
    "R07": "Authorization Revoked by Customer",
    "R08": "Payment Stopped",
    "R09": "Uncollected Funds",
    "R10": "Customer Advises Originator is Not Known to Receiver and/or Not Authorized",
    "R11": "Check Truncation Entry Return",
    "R12": "Account Sold to Another DFI",
    "R13": "RDFI Not Qualified to Participate",
    "R14": "Representative Payee Deceased or Unable to Continue in that Capacity",
    "R15": "Beneficiary or Account Holder Deceased",
    "R16": "Account Frozen",
    "R17": "File Record Edit Criteria",
    "R20": "Non-Transaction Account",
    "R21": "Invalid Company Identification",
    "R22": "Invalid Individual ID Number",
    "R23": "Credit Entry Refused by Receiver",
    "R24": "Duplicate Entry",
    "R25": "Addenda Error",
    "R26": "Mandatory Field Error",
    "R27": "Trace Number Error",
    "R28": "Routing Number Check Digit Error",
    "R29": "Corporate Customer Advises Not Authorized",
    "R30": "RDFI Not Participant in Check Truncation Program",
    "R31": "Permissible Return Entry (CCD and CTX Only)",
    "R32": "RDFI Non-Settlement",
    "R33": "Return of XCK Entry",
    "R34": "Limited Participation DFI",
    "R35": "Return of Improper Debit Entry",
    "R36": "Return of Improper Credit Entry",
    "R37": "Source Document Presented for Payment",
    "R38": "Stop Payment on Source Document",
    "R39": "Improper Source Document/Source Document Presented for Payment",
    "R61": "Misrouted Return",
    "R62": "Return of Erroneous or Reversing Debit",
    "R63": "Incorrect Dollar Amount",
    "R64": "Incorrect Individual Identification",
    "R65": "Incorrect Transaction Code",
    "R66": "Incorrect Company Identification",
    "R67": "Duplicate Return",
    "R68": "Untimely Return",
    "R69": "Multiple Errors",
    "R70": "Permissible Return Entry Not Accepted",
    "R71": "Misrouted Dishonored Return",
    "R72": "Untimely Dishonored Return",
    "R73": "Timely Original Return",
    "R74": "Corrected Return",
    "R75": "Return Not a Duplicate",
    "R76": "No Errors Found",
    "R80": "IAT Entry Coding Error",
    "R81": "Non-Participant in IAT Program",
    "R82": "Invalid Foreign Receiving DFI Identification",
    "R83": "Foreign Receiving DFI Unable to Settle",
    "R84": "Entry Not Processed by Gateway",
    "R85": "Incorrectly Coded Outbound International Payment",
}

_RETURN_ACTIONS: dict[str, str] = {
    "R01": "Retry payment after sufficient funds are available",
    "R09": "Retry payment after sufficient funds are available",
    "R02": "Contact customer for updated account information",
    "R03": "Contact customer for updated account information",
    "R04": "Verify and correct account/routing number",
    "R28": "Verify and correct account/routing number",
    "R05": "Obtain new authorization from customer",
    "R07": "Obtain new authorization from customer",
    "R10": "Obtain new authorization from customer",
    "R29": "Obtain new authorization from customer",
    "R08": "Contact customer; payment was stopped",
    "R12": "Request updated account information",
    "R15": "Contact estate or authorized representative",
    "R16": "Account is frozen; contact customer",
    "R24": "Check for duplicate submission",
}


class FileStatus(StrEnum):
    """Lifecycle of an ACH file submission."""

    DRAFT = "draft"
    GENERATED = "generated"
    SUBMITTED = "submitted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Urgency(StrEnum):
    """How fast the payer needs funds to settle."""

    STANDARD = "standard"
    URGENT = "urgent"
    REAL_TIME = "real-time"


class BeneficiaryType(StrEnum):
    """Who receives the payment."""

    INDIVIDUAL = "individual"
    BUSINESS = "business"
    VENDOR = "vendor"


class RtgsSystem(StrEnum):
    """RTGS networks an RtgsRail can front."""

    FEDWIRE = "fedwire"
    CHAPS = "chaps"
    TARGET2 = "target2"
    RTGS_INDIA = "rtgs_india"
