# =============================================================================
# CLASSIFY RAW ACTIVITY CATEGORIES
# =============================================================================
# - Map free-form channel and contact type codes onto closed enumerations
# - Every member carries an explicit integer priority used as a sort key
# - Classification is total: unknown or null codes land in UNCLASSIFIED_*


from enum import Enum
from typing import Optional
import pandas as pd


# ------------------------------------------------------------
# CONFIGURATIONS
# ------------------------------------------------------------

AUTO_DIALER_AGENT = 'AUTO_DIALER'

THIRD_PARTY_CODES = ('THIRD_PARTY', 'RELATIVE')
GUARANTOR_CODES = ('GUARANTOR', 'GUARANTOR_NO_CONTACT')
EMAIL_LIKE_CHANNELS = ('EMAIL', 'AGENT_BANK')

MISSING_CONTACT_LABEL = 'NO_CONTACT'


# ------------------------------------------------------------
# ENUMERATIONS
# ------------------------------------------------------------

class CollectionChannel(Enum):
    """Collection channels, lower rank wins."""

    PHONE = 1
    FIELD = 2
    MESSAGING = 3
    EMAIL = 4
    AGENT_BANK = 5
    UNCLASSIFIED_CHANNEL = 6

    @property
    def rank(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return self.name


class ContactType(Enum):
    """
    Contact types, lower rank wins.

    EMAIL and FIELD are only produced by the primary view's channel fallbacks.
    PROMISE and RESTRUCTURE are fixed literals assigned by their views.
    """

    PRIMARY = 1
    THIRD_PARTY = 2
    NO_CONTACT = 3
    AUTO_DIALER = 4
    EMAIL = 5
    FIELD = 6
    GUARANTOR = 7
    UNCLASSIFIED_CONTACT = 8
    PROMISE = 9
    RESTRUCTURE = 10

    @property
    def rank(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return self.name


REPORTABLE_CONTACT_TYPES = frozenset({
    ContactType.PRIMARY.label,
    ContactType.THIRD_PARTY.label,
    ContactType.NO_CONTACT.label,
    ContactType.AUTO_DIALER.label,
})


# ------------------------------------------------------------
# SCALAR CLASSIFICATION
# ------------------------------------------------------------

def classify_channel(raw_channel) -> CollectionChannel:
    if isinstance(raw_channel, str) and raw_channel in CollectionChannel.__members__:
        channel = CollectionChannel[raw_channel]
        if channel is not CollectionChannel.UNCLASSIFIED_CHANNEL:

            return channel

    return CollectionChannel.UNCLASSIFIED_CHANNEL


def _classify_by_contact_code(raw_contact_type, agent_name) -> Optional[ContactType]:
    """
    Contact type rules shared by every classified view.
    Returns None when the raw code matches no rule.
    """

    if raw_contact_type == 'PRIMARY':

        return ContactType.PRIMARY

    if raw_contact_type in THIRD_PARTY_CODES:

        return ContactType.THIRD_PARTY

    # Auto dialer override must run before the generic NO_CONTACT rule
    if raw_contact_type == 'NO_CONTACT' and agent_name == AUTO_DIALER_AGENT:

        return ContactType.AUTO_DIALER

    if raw_contact_type == 'NO_CONTACT':

        return ContactType.NO_CONTACT

    if raw_contact_type in GUARANTOR_CODES:

        return ContactType.GUARANTOR

    return None


def classify_contact_type(raw_contact_type, agent_name=None) -> ContactType:
    """
    Contact type classification without channel fallbacks (field view).
    """

    contact_type = _classify_by_contact_code(raw_contact_type, agent_name)
    if contact_type is None:

        return ContactType.UNCLASSIFIED_CONTACT

    return contact_type


def classify_primary_contact_type(raw_contact_type,
                                  agent_name=None,
                                  raw_channel=None
                                  ) -> ContactType:
    """
    Contact type classification for the primary view.

    Raw contact code rules win; when none match, the channel decides:
    FIELD channel -> FIELD, EMAIL or AGENT_BANK channel -> EMAIL.
    """

    contact_type = _classify_by_contact_code(raw_contact_type, agent_name)
    if contact_type is not None:

        return contact_type

    if raw_channel == 'FIELD':

        return ContactType.FIELD

    if raw_channel in EMAIL_LIKE_CHANNELS:

        return ContactType.EMAIL

    return ContactType.UNCLASSIFIED_CONTACT


def report_contact_type(contact_type_label) -> str:
    """
    Contact type shown in reports for a joined primary contact.
    Anything outside the four reportable labels, null included, is NO_CONTACT.
    """

    if isinstance(contact_type_label, str) and contact_type_label in REPORTABLE_CONTACT_TYPES:

        return contact_type_label

    return MISSING_CONTACT_LABEL


# ------------------------------------------------------------
# FRAME HELPERS
# ------------------------------------------------------------

def classify_channels(df: pd.DataFrame) -> pd.Series:
    """
    CollectionChannel member per row of the raw activity frame.
    """

    return df['collection_channel'].map(classify_channel).astype(object)


def classify_contact_types(df: pd.DataFrame, channel_fallback: bool = False) -> pd.Series:
    """
    ContactType member per row of the raw activity frame.
    With channel_fallback the primary view rules are applied.
    """

    if df.empty:

        return pd.Series([], index=df.index, dtype=object)

    if channel_fallback:
        members = [
            classify_primary_contact_type(contact, agent, channel)
            for contact, agent, channel in zip(df['contact_type'],
                                               df['agent_name'],
                                               df['collection_channel'])
        ]

    else:
        members = [
            classify_contact_type(contact, agent)
            for contact, agent in zip(df['contact_type'], df['agent_name'])
        ]

    return pd.Series(members, index=df.index, dtype=object)


def labels(members: pd.Series) -> pd.Series:
    return members.map(lambda member: member.label).astype(object)


def ranks(members: pd.Series) -> pd.Series:
    return members.map(lambda member: member.rank).astype('int64')


# =============================================================================
# END OF SCRIPT
# =============================================================================
