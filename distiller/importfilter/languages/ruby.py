"""Ruby import filter."""

from __future__ import annotations

from distiller.importfilter.base import ImportFilter

# Standard library features whose constants or methods don't follow the file name
RUBY_STDLIB_USAGE: dict[str, tuple[str, ...]] = {
    "json": ("JSON", "to_json"),
    "yaml": ("YAML", "Psych", "to_yaml"),
    "psych": ("Psych", "YAML"),
    "csv": ("CSV",),
    "set": ("Set", "to_set"),
    "securerandom": ("SecureRandom",),
    "fileutils": ("FileUtils",),
    "date": ("Date", "DateTime"),
    "time": ("Time",),
    "ostruct": ("OpenStruct",),
    "logger": ("Logger",),
    "optparse": ("OptionParser",),
    "tempfile": ("Tempfile",),
    "tmpdir": ("Dir.mktmpdir", "Dir.tmpdir"),
    "pathname": ("Pathname",),
    "digest": ("Digest",),
    "base64": ("Base64",),
    "benchmark": ("Benchmark",),
    "erb": ("ERB",),
    "pp": ("pp",),
    "open3": ("Open3",),
    "net/http": ("Net::HTTP",),
    "uri": ("URI",),
    "bigdecimal": ("BigDecimal",),
    "stringio": ("StringIO",),
    "timeout": ("Timeout",),
    "forwardable": ("Forwardable", "def_delegator"),
    "singleton": ("Singleton",),
    "English": ("$PROGRAM_NAME", "$ERROR_INFO", "$CHILD_STATUS"),
}


class RubyImportFilter(ImportFilter):
    """``require``, ``require_relative``, ``load`` and ``autoload``.

    More conservative than the other languages: any path with ``/`` or
    ``-`` is a file or gem that may patch anything, so it is kept. Simple
    names bind their CamelCase constant and count the raw name as well.
    """

    language = "ruby"
    aliases = ("rb",)
    comment_prefixes = ("#",)
    import_keywords = ("require", "require_relative", "load", "autoload")
    patterns = {
        "require": r"""^(require|require_relative)\s*\(?\s*['"]([^'"]+)['"]\s*\)?\s*(?:#.*)?$""",
        "load": r"""^load\s*\(?\s*['"]([^'"]+)['"]""",
        "autoload": r"""^autoload\s*\(?\s*:(\w+)\s*,\s*['"]([^'"]+)['"]""",
    }
    usage_table = RUBY_STDLIB_USAGE

    def match_statement(self, lines, i, end):
        trimmed = lines[i].strip()

        m = self.compiled["require"].match(trimmed)
        if m:
            form, path = m.groups()
            # Paths and gem names may have load-time side effects
            conservative = "/" in path or "-" in path
            if form == "require" and path in self.usage_table:
                conservative = False
            stmt = self.statement(lines, i, i, module=path, is_side_effect=conservative, form=form)
            return [stmt], 1

        m = self.compiled["load"].match(trimmed)
        if m:
            return [self.statement(lines, i, i, module=m.group(1), is_side_effect=True, form="load")], 1

        m = self.compiled["autoload"].match(trimmed)
        if m:
            constant, path = m.groups()
            stmt = self.statement(lines, i, i, module=path, imported_names=[constant], form="autoload")
            return [stmt], 1

        return [], 0

    def skip_header(self, lines, i, end):
        # =begin ... =end block comments
        if not lines[i].startswith("=begin"):
            return 0
        close = self.find_closing(lines, i + 1, end, "=end")
        return 0 if close is None else close - i + 1

    def default_names(self, module):
        name = module.rsplit("/", 1)[-1]
        if name.endswith(".rb"):
            name = name[:-3]
        camel = "".join(word[:1].upper() + word[1:] for word in name.split("_") if word)
        return [camel, name]

    def aggregate_patterns(self, imp):
        if imp.form != "require":
            return ()
        return self.usage_table.get(imp.module, ())
