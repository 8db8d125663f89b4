"""C# import filter."""

from __future__ import annotations

from distiller.importfilter.base import ImportFilter

# Namespaces are used through their members, never by name
SYSTEM_NAMESPACE_USAGE: dict[str, tuple[str, ...]] = {
    "System": ("Console", "DateTime", "String", "Exception", "Math", "Guid", "TimeSpan", "Environment"),
    "System.Collections.Generic": ("List<", "Dictionary<", "HashSet<", "Queue<", "Stack<", "IEnumerable<", "KeyValuePair<"),
    "System.Linq": (".Where(", ".Select(", ".OrderBy(", ".ToList(", ".First(", ".Any(", ".GroupBy("),
    "System.IO": ("File", "Directory", "Path", "Stream"),
    "System.Threading.Tasks": ("Task", "async", "await"),
    "System.Threading": ("Thread", "CancellationToken", "Interlocked", "Monitor"),
    "System.Text": ("StringBuilder", "Encoding"),
    "System.Text.RegularExpressions": ("Regex", "Match"),
    "System.Net.Http": ("HttpClient", "HttpResponseMessage"),
    "Newtonsoft.Json": ("JsonConvert", "JsonProperty", "JsonSerializer"),
}


class CSharpImportFilter(ImportFilter):
    """``using`` directives: namespace, alias, static and global forms.

    ``using A = X.Y;`` binds ``A``. ``using static`` brings members into
    scope unqualified and is treated as a wildcard; ``global using`` applies
    to other files and is never removed.
    """

    language = "csharp"
    aliases = ("c#", "cs")
    comment_prefixes = ("//", "/*", "*", "*/")
    import_keywords = ("using", "global using")
    header_prefixes = ("namespace ", "{", "#", "[assembly:", "[module:")
    patterns = {
        "alias": r"^(global\s+)?using\s+(\w+)\s*=\s*([\w.:<>, ]+?)\s*;\s*(?://.*)?$",
        "static": r"^(global\s+)?using\s+static\s+([\w.<>, ]+?)\s*;\s*(?://.*)?$",
        "namespace": r"^(global\s+)?using\s+([\w.]+)\s*;\s*(?://.*)?$",
    }
    usage_table = SYSTEM_NAMESPACE_USAGE

    def match_statement(self, lines, i, end):
        trimmed = lines[i].strip()

        m = self.compiled["alias"].match(trimmed)
        if m:
            is_global, alias, target = m.groups()
            stmt = self.statement(
                lines,
                i,
                i,
                module=target,
                imported_names=[target],
                aliases={target: alias},
                is_side_effect=bool(is_global),
                form="alias",
            )
            return [stmt], 1

        m = self.compiled["static"].match(trimmed)
        if m:
            is_global, target = m.groups()
            stmt = self.statement(
                lines, i, i, module=target, is_wildcard=True, is_side_effect=bool(is_global), form="static"
            )
            return [stmt], 1

        m = self.compiled["namespace"].match(trimmed)
        if m:
            is_global, namespace = m.groups()
            stmt = self.statement(lines, i, i, module=namespace, is_side_effect=bool(is_global), form="using")
            return [stmt], 1

        return [], 0
