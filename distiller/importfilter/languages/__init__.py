"""Per-language import filter descriptors."""

from distiller.importfilter.languages.c import CImportFilter
from distiller.importfilter.languages.cpp import CppImportFilter
from distiller.importfilter.languages.csharp import CSharpImportFilter
from distiller.importfilter.languages.golang import GoImportFilter
from distiller.importfilter.languages.java import JavaImportFilter
from distiller.importfilter.languages.javascript import JavaScriptImportFilter
from distiller.importfilter.languages.kotlin import KotlinImportFilter
from distiller.importfilter.languages.php import PhpImportFilter
from distiller.importfilter.languages.python import PythonImportFilter
from distiller.importfilter.languages.ruby import RubyImportFilter
from distiller.importfilter.languages.rust import RustImportFilter

BUILTIN_FILTERS = (
    PythonImportFilter,
    GoImportFilter,
    JavaScriptImportFilter,
    JavaImportFilter,
    KotlinImportFilter,
    CSharpImportFilter,
    CppImportFilter,
    CImportFilter,
    PhpImportFilter,
    RubyImportFilter,
    RustImportFilter,
)

__all__ = [cls.__name__ for cls in BUILTIN_FILTERS] + ["BUILTIN_FILTERS"]
