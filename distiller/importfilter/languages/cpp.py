"""C++ include filter."""

from __future__ import annotations

from distiller.importfilter.base import ImportFilter

# System header -> members whose presence proves the header is needed
CPP_HEADER_USAGE: dict[str, tuple[str, ...]] = {
    "iostream": ("std::cout", "std::cin", "std::cerr", "std::clog", "std::endl", "std::ostream", "std::istream"),
    "string": ("std::string", "std::to_string", "std::getline", "std::wstring"),
    "vector": ("std::vector",),
    "map": ("std::map", "std::multimap"),
    "unordered_map": ("std::unordered_map",),
    "set": ("std::set", "std::multiset"),
    "unordered_set": ("std::unordered_set",),
    "algorithm": ("std::sort", "std::find", "std::copy", "std::transform", "std::min", "std::max", "std::count"),
    "memory": ("std::unique_ptr", "std::shared_ptr", "std::make_unique", "std::make_shared", "std::weak_ptr"),
    "sstream": ("std::stringstream", "std::ostringstream", "std::istringstream"),
    "fstream": ("std::ifstream", "std::ofstream", "std::fstream"),
    "utility": ("std::pair", "std::move", "std::make_pair", "std::swap", "std::forward"),
    "functional": ("std::function", "std::bind", "std::hash"),
    "optional": ("std::optional", "std::nullopt"),
    "thread": ("std::thread", "std::this_thread"),
    "mutex": ("std::mutex", "std::lock_guard", "std::unique_lock"),
    "cstdio": ("printf", "fprintf", "sprintf", "snprintf", "fopen", "fclose", "puts"),
    "cstdlib": ("malloc", "free", "exit", "atoi", "abs", "std::getenv", "EXIT_SUCCESS", "EXIT_FAILURE"),
    "cstring": ("strlen", "strcpy", "strcmp", "memcpy", "memset", "strncpy"),
    "cmath": ("sqrt", "pow", "sin", "cos", "floor", "ceil", "fabs", "std::sqrt", "std::pow"),
}


class CppImportFilter(ImportFilter):
    """``#include`` directives.

    Quoted (project) headers are always kept. Known system headers are kept
    when one of their table members appears; unknown system headers are
    kept whenever ``std::`` appears at all. A ``using namespace std``
    directive counts as usage of every system header, since the members
    may then appear unqualified.
    """

    language = "cpp"
    aliases = ("c++", "cc", "cxx", "hpp")
    comment_prefixes = ("//", "/*", "*", "*/")
    import_keywords = ("#include", "# include")
    patterns = {
        "include": r"^#\s*include\s*([<\"])([^>\"]+)[>\"]\s*(?://.*|/\*.*)?$",
        "directive": r"^#\s*\w+",
    }
    usage_table = CPP_HEADER_USAGE

    def match_statement(self, lines, i, end):
        m = self.compiled["include"].match(lines[i].strip())
        if not m:
            return [], 0
        opener, header = m.groups()
        # Project headers may define anything
        keep = opener == '"' or not self.analyzable(header)
        stmt = self.statement(
            lines, i, i, module=header, is_side_effect=keep, form="system" if opener == "<" else "local"
        )
        return [stmt], 1

    def analyzable(self, header: str) -> bool:
        """Only standard-library style headers (no extension, no directory) are judged."""
        return header in self.usage_table or ("." not in header and "/" not in header)

    def skip_header(self, lines, i, end):
        # Include guards, pragmas, conditional compilation
        return 1 if self.compiled["directive"].match(lines[i].strip()) else 0

    def bound_names(self, imp):
        return []

    def aggregate_patterns(self, imp):
        return self.usage_table.get(imp.module, ("std::",)) + ("using namespace std",)
