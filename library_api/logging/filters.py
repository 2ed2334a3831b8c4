import logging
import re
from typing import List, Optional


class SensitiveDataFilter(logging.Filter):
    """
    Mask secrets and e-mail addresses before a record reaches any handler.
    """

    EMAIL_PATTERN = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*(@[A-Za-z0-9.-]+)")

    def __init__(
        self,
        name: str = "",
        sensitive_fields: Optional[List[str]] = None,
        replacement: str = "***REDACTED***",
        mask_emails: bool = True,
    ):
        super().__init__(name)
        self.sensitive_fields = sensitive_fields or [
            "password",
            "secret",
            "token",
            "authorization",
        ]
        self.replacement = replacement
        self.mask_emails = mask_emails
        self._patterns = [
            re.compile(rf"""(["']?{field}["']?\s*[=:]\s*)(["']?)[^\s,;"'}}]+\2""", re.IGNORECASE)
            for field in self.sensitive_fields
        ]

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "original_msg"):
            record.original_msg = record.msg

        msg = record.getMessage()
        masked = msg
        for pattern in self._patterns:
            masked = pattern.sub(rf"\1\2{self.replacement}\2", masked)
        if self.mask_emails:
            masked = self.EMAIL_PATTERN.sub(r"\1***\2", masked)

        if masked != msg:
            record.msg = masked
            record.args = ()
        return True
