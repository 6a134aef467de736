import logging
from typing import Dict, Iterable, Mapping, Optional, Union

from complaint_desk.core.errors import ValidationError

logger = logging.getLogger(__name__)

# Field name -> dictionary type, as configured on the server side
COMPLAINT_DICT_TYPES = {
    "category": "complaint_type",
    "source": "complaint_source",
    "level": "complaint_level",
}

class CodeDictionary:
    """
    Lookup table of valid codes for dictionary-backed fields.

    Codes are configuration data, so a dictionary type that has not been
    loaded accepts any code. Once a type is loaded, only its codes pass.
    """

    def __init__(self, entries: Optional[Mapping[str, Union[Mapping[str, str], Iterable[str]]]] = None):
        self._entries: Dict[str, Dict[str, str]] = {}
        for dict_type, codes in (entries or {}).items():
            self.load(dict_type, codes)

    def load(self, dict_type: str, codes: Union[Mapping[str, str], Iterable[str]]) -> None:
        if isinstance(codes, Mapping):
            table = {str(code): str(label) for code, label in codes.items()}
        else:
            table = {str(code): str(code) for code in codes}
        self._entries[dict_type] = table
        logger.info("Loaded dictionary %s with %s codes", dict_type, len(table))

    def is_valid(self, dict_type: str, code: str) -> bool:
        if dict_type not in self._entries:
            return True
        return code in self._entries[dict_type]

    def validate(self, values: Mapping[str, object], field_types: Mapping[str, str]) -> None:
        invalid = []
        for field, dict_type in field_types.items():
            code = values.get(field)
            if code is None:
                continue
            if not self.is_valid(dict_type, str(code)):
                invalid.append(f"{field}={code!r}")
        if invalid:
            raise ValidationError(f"Unknown dictionary codes: {', '.join(invalid)}")
