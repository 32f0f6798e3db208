"""
Canonical record types shared by every store operation, and their text encoding.
"""

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .errors import RecordDecodeError


def now_rfc3339() -> str:
    """Current UTC time as an RFC 3339 string with second precision."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(frozen=True)
class Entry:
    uuid: str
    question: str
    answer: str

    def to_dict(self) -> Dict[str, str]:
        return {"uuid": self.uuid, "question": self.question, "answer": self.answer}

    @classmethod
    def from_dict(cls, data: Any) -> "Entry":
        if not isinstance(data, dict):
            raise RecordDecodeError(f"entry must be an object, got {type(data).__name__}")
        try:
            values = {name: data[name] for name in ("uuid", "question", "answer")}
        except KeyError as e:
            raise RecordDecodeError(f"entry is missing field {e.args[0]!r}") from e
        for name, value in values.items():
            if not isinstance(value, str):
                raise RecordDecodeError(f"entry field {name!r} must be a string")
        return cls(**values)


@dataclass(frozen=True)
class Record:
    """All Q&A entries for one phone number plus check-in/check-out times."""

    tel_number: str
    check_in: str
    questions: List[Entry] = field(default_factory=list)
    checkout: Optional[str] = None

    def with_entries(self, new_entries: Sequence[Entry]) -> "Record":
        """Copy with new_entries appended; timestamps untouched."""
        return replace(self, questions=list(self.questions) + list(new_entries))

    def checked_out(self, entry_id: str, timestamp: str) -> "Record":
        """Copy with checkout set if any entry carries entry_id.

        Only the first matching entry is considered, and the timestamp is
        stored on the record, not the entry. Without a match the record is
        returned unchanged.
        """
        for entry in self.questions:
            if entry.uuid == entry_id:
                return replace(self, checkout=timestamp)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tel_number": self.tel_number,
            "questions": [entry.to_dict() for entry in self.questions],
            "check_in": self.check_in,
            "checkout": self.checkout,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Record":
        if not isinstance(data, dict):
            raise RecordDecodeError(f"record must be an object, got {type(data).__name__}")
        missing = [k for k in ("tel_number", "questions", "check_in", "checkout") if k not in data]
        if missing:
            raise RecordDecodeError(f"record is missing fields: {missing}")

        tel_number, check_in, checkout = data["tel_number"], data["check_in"], data["checkout"]
        if not isinstance(tel_number, str) or not isinstance(check_in, str):
            raise RecordDecodeError("tel_number and check_in must be strings")
        if checkout is not None and not isinstance(checkout, str):
            raise RecordDecodeError("checkout must be a string or null")
        if not isinstance(data["questions"], list):
            raise RecordDecodeError("questions must be a list")

        return cls(
            tel_number=tel_number,
            check_in=check_in,
            questions=[Entry.from_dict(item) for item in data["questions"]],
            checkout=checkout,
        )


def encode_record(record: Record) -> str:
    """Serialize a record to its stored JSON text."""
    try:
        encoded = json.dumps(record.to_dict(), ensure_ascii=False, separators=(",", ":"))
        # SQLite stores TEXT as UTF-8; lone surrogates cannot be bound
        encoded.encode("utf-8")
    except (TypeError, ValueError) as e:
        raise RecordDecodeError(f"Failed to encode record for {record.tel_number!r}: {e}") from e
    return encoded


def decode_record(raw: str) -> Record:
    """Parse stored JSON text back into a Record."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise RecordDecodeError(f"Stored value is not valid JSON: {e}") from e
    return Record.from_dict(data)
