"""Integration adapters for exchanging trees with other XML libraries.

Adapters convert a parsed ``XMLElement`` tree into a foreign element type and
back. Conversions never raise: failures are reported through a
``ConversionResult`` whose ``success`` flag is False.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from strict_xml_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    XMLSyntaxError,
    get_logger,
)
from strict_xml_parser.tree import XMLElement


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _etree(self) -> Any:
        """Return the ElementTree-compatible module of the target library."""

    def to_target(self, element: XMLElement) -> ConversionResult:
        """Convert an ``XMLElement`` tree into the target library's element type."""
        start_time = time.time()
        if not isinstance(element, XMLElement):
            return self._create_error_result(
                f"Expected XMLElement, got {type(element).__name__}", element, start_time
            )
        if not self.is_available():
            return self._create_error_result(
                f"{self.metadata.target_library} is not installed", element, start_time
            )

        etree = self._etree()
        converted = self._convert_element(element, etree)
        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=element,
            conversion_time_ms=self._elapsed_ms(start_time),
            metadata={"element_count": sum(1 for _ in element.iter())},
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert a target library element into an ``XMLElement`` tree.

        The foreign element is serialized and re-parsed, so the usual
        restrictions apply: no mixed content and no tail text.
        """
        from strict_xml_parser.api.parser import parse

        start_time = time.time()
        if not self.is_available():
            return self._create_error_result(
                f"{self.metadata.target_library} is not installed", target_data, start_time
            )
        if not hasattr(target_data, "tag"):
            return self._create_error_result(
                f"Target data is not a valid {self.metadata.name} element",
                target_data,
                start_time,
            )

        xml_string = self._etree().tostring(target_data, encoding="unicode")
        try:
            root = parse(xml_string, correlation_id=self.correlation_id)
        except XMLSyntaxError as e:
            return self._create_error_result(
                f"Failed to convert from {self.metadata.name}: {e}", target_data, start_time
            )

        return ConversionResult(
            success=True,
            converted_data=root,
            original_data=target_data,
            conversion_time_ms=self._elapsed_ms(start_time),
            metadata={"original_tag": target_data.tag, "xml_length": len(xml_string)},
        )

    def _convert_element(self, element: XMLElement, etree: Any) -> Any:
        converted = etree.Element(element.tag)
        for key, value in element.attributes.items():
            converted.set(key, value)
        if element.value is not None:
            converted.text = element.value
        for child in element.children:
            converted.append(self._convert_element(child, etree))
        return converted

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return (time.time() - start_time) * 1000

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        start_time: float,
    ) -> ConversionResult:
        self._logger.warning(error_message)
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=self._elapsed_ms(start_time),
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id,
                )
            ],
        )


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            target_library="xml.etree.ElementTree",
            description="Bidirectional conversion between XMLElement and ElementTree",
        )

    def is_available(self) -> bool:
        return True

    def _etree(self) -> Any:
        import xml.etree.ElementTree as ET
        return ET


class LxmlAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            target_library="lxml",
            description="Bidirectional conversion between XMLElement and lxml.etree",
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
        except ImportError:
            return False
        return True

    def _etree(self) -> Any:
        import lxml.etree
        return lxml.etree


class AdapterRegistry:
    """Thread-safe registry of adapter classes keyed by name."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        with self._lock:
            self._adapters[adapter_class().metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None,
    ) -> Optional[IntegrationAdapter]:
        """Get a new adapter instance, or None if unknown or unavailable."""
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None
        instance = adapter_class(correlation_id)
        return instance if instance.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List metadata of adapters whose target library is importable."""
        with self._lock:
            classes = list(self._adapters.values())
        available = []
        for adapter_class in classes:
            instance = adapter_class()
            if instance.is_available():
                available.append(instance.metadata)
        return available


_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None,
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance."""
    return _adapter_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available integration adapters."""
    return _adapter_registry.list_available_adapters()


register_adapter(ElementTreeAdapter)
register_adapter(LxmlAdapter)
