#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Result objects handed from cutter workers to the UI

A worker never raises into a Qt slot. It emits exactly one Result holding
either the operation's value (output bytes, VideoMetadata) or the
VideoCutterError that stopped it.
"""

from typing import TypeVar, Generic, Optional, List, Dict, Any
from dataclasses import dataclass, field

from .exceptions import VideoCutterError

T = TypeVar('T')


@dataclass
class Result(Generic[T]):
    """
    Outcome of one cutter operation

    ``warnings`` collects non-fatal findings (e.g. an unknown duration) and
    ``metadata`` carries operation facts such as timing and output size.
    """
    success: bool
    value: Optional[T] = None
    error: Optional[VideoCutterError] = None
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, value: T, warnings: Optional[List[str]] = None, **metadata) -> 'Result[T]':
        """Successful outcome carrying ``value``; keyword arguments become metadata"""
        return cls(success=True, value=value, warnings=list(warnings or []), metadata=metadata)

    @classmethod
    def error(cls, error: VideoCutterError, warnings: Optional[List[str]] = None) -> 'Result[T]':
        """Failed outcome carrying the error that ended the operation"""
        return cls(success=False, error=error, warnings=list(warnings or []))

    @property
    def user_message(self) -> Optional[str]:
        """Message to show in the UI for a failed outcome, None on success"""
        return None if self.success else self.error.user_message

    def unwrap(self) -> T:
        """
        Value of a successful outcome

        Raises:
            VideoCutterError: The stored error, for a failed outcome
        """
        if not self.success:
            raise self.error
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value if self.success else default

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def add_warning(self, warning: str) -> 'Result[T]':
        self.warnings.append(warning)
        return self

    def add_metadata(self, key: str, value: Any) -> 'Result[T]':
        self.metadata[key] = value
        return self
