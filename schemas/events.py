"""Host bridge event models.

Inbound events originate in the host shell (file menu, native dialogs,
persistence) and are translated into reducer meta-inputs. Outbound events
carry complete snapshots, never deltas, so only the latest one matters.
Each model has a stable ``type`` field for logging and round-trip
serialization.
"""

from __future__ import annotations

from typing import List, Literal, Union

from pydantic import Field

from schemas.sheet import Balances, Expense, _JsonMixin


# Host -> core


class DocumentOpened(_JsonMixin):
    type: Literal["DocumentOpened"] = "DocumentOpened"
    expenses: List[Expense] = Field(default_factory=list)
    balances: Balances = Field(default_factory=Balances)


class NewDocumentRequested(_JsonMixin):
    type: Literal["NewDocumentRequested"] = "NewDocumentRequested"


class SaveAcknowledged(_JsonMixin):
    type: Literal["SaveAcknowledged"] = "SaveAcknowledged"


class UndoRequested(_JsonMixin):
    type: Literal["UndoRequested"] = "UndoRequested"


class RedoRequested(_JsonMixin):
    type: Literal["RedoRequested"] = "RedoRequested"


HostEvent = Union[
    DocumentOpened, NewDocumentRequested, SaveAcknowledged, UndoRequested, RedoRequested
]


# Core -> host


class DocumentSnapshot(_JsonMixin):
    """Latest rows and balances; the persistence side writes exactly this."""

    type: Literal["DocumentSnapshot"] = "DocumentSnapshot"
    expenses: List[Expense] = Field(default_factory=list)
    balances: Balances = Field(default_factory=Balances)


class CleanStateChanged(_JsonMixin):
    type: Literal["CleanStateChanged"] = "CleanStateChanged"
    clean: bool


CoreEvent = Union[DocumentSnapshot, CleanStateChanged]
