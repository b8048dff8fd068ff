"""Doc-block annotation engine - requirements, expected exceptions, data sets."""

from docplane.annotation.docblock import DocBlock
from docplane.annotation.models import (
    ConstraintRequirement,
    DataSet,
    ExpectedException,
    InlineAnnotation,
    NamedRow,
    ProvidedData,
    Requirements,
    SymbolDescriptor,
    VersionRequirement,
)
from docplane.annotation.resolution import (
    ConstantResolver,
    PythonConstantResolver,
    PythonSymbolResolver,
    SymbolResolver,
)

__all__ = [
    "DocBlock",
    "ConstraintRequirement",
    "DataSet",
    "ExpectedException",
    "InlineAnnotation",
    "NamedRow",
    "ProvidedData",
    "Requirements",
    "SymbolDescriptor",
    "VersionRequirement",
    "ConstantResolver",
    "PythonConstantResolver",
    "PythonSymbolResolver",
    "SymbolResolver",
]
