"""Tests for the unused-import analyzer and its language filters."""

import logging

import pytest

from distiller.errors import UnsupportedLanguageError
from distiller.importfilter import (
    FilterRegistry,
    FilterResult,
    ImportStatement,
    default_registry,
    filter_imports,
    get_filter,
    search_for_usage,
)
from distiller.importfilter.base import file_blocks, remove_line_ranges, usage_pattern
from distiller.importfilter.languages.golang import GoImportFilter
from distiller.importfilter.languages.python import PythonImportFilter


def _removed(code, language):
    return [text.strip() for text in filter_imports(code, language).removed]


# --- Toolkit ---


def test_search_for_usage_after_line():
    lines = ["import os", "x = os.name"]
    assert search_for_usage(lines, "os", 1)
    assert not search_for_usage(lines, "os", 2)


def test_search_for_usage_respects_end_line():
    lines = ["import os", "", "os.sep"]
    assert not search_for_usage(lines, "os", 1, end_line=2)


def test_usage_pattern_word_boundaries():
    assert usage_pattern("re").search("re.compile(x)")
    assert not usage_pattern("re").search("result = 1")
    # Punctuation edges match as plain substrings
    assert usage_pattern("List<").search("var l = new List<int>();")
    assert not usage_pattern("List<").search("IList<int> l;")
    assert usage_pattern(".Where(").search("items.Where(x => x)")


def test_remove_line_ranges():
    lines = ["a", "b", "c", "d", "e"]
    assert remove_line_ranges(lines, [(1, 1), (3, 4)]) == ["b", "e"]
    assert remove_line_ranges(lines, [(9, 9)]) == lines
    assert lines == ["a", "b", "c", "d", "e"]


def test_file_blocks():
    assert file_blocks(["x", "y"]) == [(0, 2)]
    lines = ['<file path="a">', "a", "</file>", '<file path="b">', "b", "</file>"]
    assert file_blocks(lines) == [(1, 2), (4, 5)]


def test_models():
    stmt = ImportStatement(start_line=3, end_line=5, text="x")
    assert stmt.line_count == 3
    assert stmt.span.start_line == 3
    assert stmt.span.end_line == 5

    result = FilterResult(code="", removed=["import os"], language="python")
    assert result.changed
    assert result.summary() == "[python] removed 1 unused import(s)"
    assert "boom" in FilterResult(code="", error="boom", language="go").summary()


# --- Scenarios ---


GO_HELLO = """package main

import (
    "fmt"
    "os"
)

func main() {
    fmt.Println("hello")
}
"""


def test_go_block_removes_only_unused_spec():
    result = filter_imports(GO_HELLO, "go")
    assert [r.strip() for r in result.removed] == ['"os"']
    assert result.code == GO_HELLO.replace('    "os"\n', "")
    assert result.error is None


PY_TYPE_CHECKING = '''from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections import OrderedDict
    from decimal import Decimal


def total(items: "OrderedDict[str, int]") -> int:
    return sum(items.values())
'''


def test_python_type_checking_guard():
    result = filter_imports(PY_TYPE_CHECKING, "python")
    assert [r.strip() for r in result.removed] == ["from decimal import Decimal"]
    assert "from collections import OrderedDict" in result.code
    assert "from typing import TYPE_CHECKING" in result.code
    assert "from __future__ import annotations" in result.code


JS_SIDE_EFFECTS = """import './polyfills';
import 'reflect-metadata';
require('dotenv/config');
import { unused } from './lib';

console.log('ready');
"""


def test_javascript_side_effect_imports_kept():
    result = filter_imports(JS_SIDE_EFFECTS, "javascript")
    assert result.removed == ["import { unused } from './lib';"]
    assert "import './polyfills';" in result.code
    assert "import 'reflect-metadata';" in result.code
    assert "require('dotenv/config');" in result.code


# --- Safety: used imports are never removed ---


USED_CASES = [
    ("python", "import os", "os.getcwd()"),
    ("python", "import numpy as np", "np.zeros(3)"),
    ("python", "from os import path as p", "p.join('a')"),
    ("python", "import xml.etree.ElementTree", "xml.etree.ElementTree.parse(f)"),
    ("go", 'import "net/http"', "http.Get(url)"),
    ("javascript", "import React from 'react';", "React.render();"),
    ("javascript", "import * as path from 'path';", "path.join(a);"),
    ("javascript", "const { readFile: rf } = require('fs');", "rf(x);"),
    ("typescript", "import type { User } from './user';", "let u: User;"),
    ("java", "import java.util.List;", "List<String> xs;"),
    ("java", "import static org.junit.Assert.assertEquals;", "assertEquals(1, 1);"),
    ("kotlin", "import kotlinx.coroutines.launch as go", "go { }"),
    ("csharp", "using System.Linq;", "var x = items.Where(i => i > 1);"),
    ("csharp", "using Json = Newtonsoft.Json.JsonConvert;", "Json.SerializeObject(x);"),
    ("cpp", "#include <vector>", "std::vector<int> v;"),
    ("c", "#include <stdio.h>", 'printf("hi");'),
    ("php", "use App\\Models\\User;", "$u = new User();"),
    ("ruby", "require 'json'", "JSON.parse(s)"),
    ("ruby", "require 'set'", "s = Set.new"),
    ("rust", "use std::collections::HashMap;", "let m: HashMap<u8, u8> = HashMap::new();"),
]


@pytest.mark.parametrize("language, statement, usage", USED_CASES)
def test_used_import_is_kept(language, statement, usage):
    code = f"{statement}\n\n{usage}\n"
    result = filter_imports(code, language)
    assert result.removed == []
    assert result.code == code


UNUSED_CASES = [
    ("python", "import os", "print(1)"),
    ("javascript", "import { a, b } from './m';", "run();"),
    ("java", "import java.util.Map;", "int x = 1;"),
    ("kotlin", "import kotlin.math.sqrt", "fun main() {}"),
    ("csharp", "using System.Text;", "int x = 1;"),
    ("cpp", "#include <map>", "int main() { return 0; }"),
    ("php", "use Foo\\Bar as Baz;", "echo 1;"),
    ("ruby", "require 'csv'", "puts 1"),
    ("rust", "use std::collections::BTreeMap;", "fn main() {}"),
]


@pytest.mark.parametrize("language, statement, usage", UNUSED_CASES)
def test_unused_import_is_removed(language, statement, usage):
    result = filter_imports(f"{statement}\n\n{usage}\n", language)
    assert result.removed == [statement]
    assert result.code == f"\n{usage}\n"


RETAINED_CASES = [
    ("python", "from os.path import *"),
    ("python", "from __future__ import annotations"),
    ("go", 'import _ "github.com/lib/pq"'),
    ("go", 'import . "math"'),
    ("go", 'import "C"'),
    ("javascript", "import './styles.css';"),
    ("javascript", "require('./setup');"),
    ("java", "import java.util.*;"),
    ("java", "import static java.lang.Math.*;"),
    ("kotlin", "import kotlin.math.*"),
    ("csharp", "using static System.Math;"),
    ("csharp", "global using System.Text;"),
    ("cpp", '#include "config.h"'),
    ("cpp", "#include <boost/asio.hpp>"),
    ("c", "#include <sys/types.h>"),
    ("php", "require_once __DIR__ . '/vendor/autoload.php';"),
    ("ruby", "require 'active_support/core_ext'"),
    ("ruby", "require 'rest-client'"),
    ("ruby", "load 'tasks.rb'"),
    ("rust", "use std::io::prelude::*;"),
    ("rust", "pub use crate::errors::Error;"),
    ("rust", "use std::io::Write;"),
]


@pytest.mark.parametrize("language, statement", RETAINED_CASES)
def test_side_effect_and_wildcard_imports_kept(language, statement):
    result = filter_imports(f"{statement}\n\nnothing_here()\n", language)
    assert result.removed == []
    assert statement in result.code


# --- Engine behavior ---


def test_surviving_lines_keep_their_order():
    code = "import os\nimport sys\nimport json\n\nx = 1\nprint(sys.argv)\ny = 2\n"
    result = filter_imports(code, "python")
    assert result.removed == ["import os", "import json"]
    assert result.code == "import sys\n\nx = 1\nprint(sys.argv)\ny = 2\n"


def test_usage_inside_import_section_does_not_count():
    code = (
        "import config from './config';\n"
        "import { load } from './loader'; // reads config\n"
        "\n"
        "load();\n"
    )
    assert _removed(code, "javascript") == ["import config from './config';"]


def test_comment_mentions_count_as_usage():
    code = "import os\n\n# os is needed by plugins\nrun()\n"
    assert _removed(code, "python") == []


def test_whole_word_matching():
    code = "import re\n\nresult = 1\n"
    assert _removed(code, "python") == ["import re"]


def test_file_blocks_analyzed_separately():
    code = (
        '<file path="a.py">\n'
        "import os\n"
        "import sys\n"
        "\n"
        "print(os.name)\n"
        "</file>\n"
        '<file path="b.py">\n'
        "import os\n"
        "\n"
        "print(sys.argv)\n"
        "</file>\n"
    )
    result = filter_imports(code, "python")
    assert result.removed == ["import sys", "import os"]
    assert result.code.count("import os") == 1
    assert result.code.index("import os") < result.code.index('<file path="b.py">')


def test_code_without_imports_unchanged():
    code = "def f():\n    return 1\n"
    result = filter_imports(code, "python")
    assert result.code == code
    assert not result.changed


def test_unknown_language_passes_through():
    result = filter_imports("IDENTIFICATION DIVISION.\n", "cobol")
    assert result.code == "IDENTIFICATION DIVISION.\n"
    assert result.removed == []
    assert result.error is None


def test_invalid_pattern_set_degrades_to_pass_through():
    class BrokenFilter(PythonImportFilter):
        patterns = {"import": r"^import\s+(", "from": r"^from"}

    impl = BrokenFilter()
    result = impl.filter_unused_imports("import os\n")
    assert result.code == "import os\n"
    assert result.removed == []
    assert "invalid pattern" in result.error


def test_filter_fault_returns_input_unchanged():
    class ExplodingFilter(PythonImportFilter):
        def match_statement(self, lines, i, end):
            raise RuntimeError("boom")

    result = ExplodingFilter().filter_unused_imports("import os\n")
    assert result.code == "import os\n"
    assert result.error == "[python import filter] boom"


def test_debug_logging_follows_verbosity(caplog):
    caplog.set_level(logging.DEBUG, logger="distiller.importfilter")

    filter_imports(GO_HELLO, "go", verbosity=0)
    assert not [r for r in caplog.records if "import filter" in r.getMessage()]

    filter_imports(GO_HELLO, "go", verbosity=2)
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("[go import filter] Removing unused import") for m in messages)


# --- Registry ---


def test_registry_aliases():
    assert get_filter("golang") is get_filter("go")
    assert get_filter("TypeScript") is get_filter("javascript")
    assert get_filter("c#") is get_filter("csharp")


def test_registry_unknown_language():
    with pytest.raises(UnsupportedLanguageError):
        get_filter("cobol")


def test_default_registry_languages():
    assert default_registry().languages() == [
        "c",
        "cpp",
        "csharp",
        "go",
        "java",
        "javascript",
        "kotlin",
        "php",
        "python",
        "ruby",
        "rust",
    ]
    assert "ts" in default_registry()


def test_explicit_registry():
    registry = FilterRegistry()
    registry.register_filter(GoImportFilter())
    assert registry.languages() == ["go"]
    assert registry.filter_imports(GO_HELLO, "golang").removed
    assert registry.filter_imports("import os\n", "python").code == "import os\n"


# --- Python ---


def test_python_parenthesized_import():
    code = "from typing import (\n    Dict,\n    List,\n)\nimport os\n\nos.getcwd()\n"
    result = filter_imports(code, "python")
    assert result.removed == ["from typing import (\n    Dict,\n    List,\n)"]
    assert result.code == "import os\n\nos.getcwd()\n"


def test_python_partially_used_statement_kept():
    code = "from typing import (\n    Any,\n    Optional,  # unused\n)\n\ndef f(x: Any): ...\n"
    assert _removed(code, "python") == []


def test_python_statements_sharing_a_line_left_alone():
    code = "from a import b; import c\nimport os\n\nprint(b, c)\n"
    result = filter_imports(code, "python")
    assert result.removed == ["import os"]
    assert result.code == "from a import b; import c\n\nprint(b, c)\n"


def test_python_module_docstring_header():
    code = '"""Module doc.\n\nMore text.\n"""\nimport os\nimport sys\n\nprint(sys.argv)\n'
    assert _removed(code, "python") == ["import os"]


def test_python_try_except_import_guard():
    code = (
        "try:\n"
        "    import ujson as json\n"
        "except ImportError:\n"
        "    import json\n"
        "\n"
        "data = json.loads(s)\n"
    )
    assert _removed(code, "python") == []


# --- Go ---


GO_ALIASES = """package main

import (
    "fmt"
    _ "github.com/lib/pq"
    . "math"
    str "strings"
    "github.com/go-redis/redis/v8"
    yaml "gopkg.in/yaml.v3"
    "github.com/mattn/go-isatty"
    "k8s.io/api/core/v1"
    "C"
)

func main() {
    fmt.Println(Sqrt(2), redis.Nil)
    _ = isatty.IsTerminal
    _ = v1.Pod{}
}
"""


def test_go_aliases_versions_and_prefixes():
    assert _removed(GO_ALIASES, "go") == ['str "strings"', 'yaml "gopkg.in/yaml.v3"']


def test_go_single_line_imports():
    code = 'package main\n\nimport "fmt"\nimport "os"\n\nfunc main() { fmt.Println(1) }\n'
    assert _removed(code, "go") == ['import "os"']


def test_go_unterminated_block_left_alone():
    code = 'package main\n\nimport (\n    "os"\n'
    assert filter_imports(code, "go").code == code


# --- JavaScript / TypeScript ---


def test_javascript_multiline_named_import():
    code = (
        "import {\n"
        "  useState,\n"
        "  useEffect,\n"
        "} from 'react';\n"
        "import lodash from 'lodash';\n"
        "\n"
        "export function App() {\n"
        "  useState(0);\n"
        "}\n"
    )
    assert _removed(code, "javascript") == ["import lodash from 'lodash';"]


def test_javascript_directives_and_reexports_skipped():
    code = (
        "'use strict';\n"
        "export { helper } from './helper';\n"
        "const fs = require('fs');\n"
        "\n"
        "module.exports = 1;\n"
    )
    assert _removed(code, "javascript") == ["const fs = require('fs');"]


def test_javascript_statements_sharing_a_line_left_alone():
    code = "import a from 'x'; import c from 'y';\nimport d from 'z';\n\nconsole.log(a, c);\n"
    result = filter_imports(code, "javascript")
    assert result.removed == ["import d from 'z';"]
    assert result.code.startswith("import a from 'x'; import c from 'y';\n\n")


# --- Java / Kotlin ---


def test_java_package_and_annotations():
    code = (
        "package com.example;\n"
        "\n"
        "import java.util.List;\n"
        "import java.util.Map;\n"
        "import java.io.*;\n"
        "\n"
        "@Service\n"
        "public class Foo {\n"
        "    private List<String> items;\n"
        "}\n"
    )
    assert _removed(code, "java") == ["import java.util.Map;"]


def test_kotlin_alias_binds_alias_only():
    code = "package app\n\nimport java.util.Date as JDate\n\nval d = Date()\n"
    assert _removed(code, "kotlin") == ["import java.util.Date as JDate"]


# --- C# ---


CSHARP_PROGRAM = """using System;
using System.Collections.Generic;
using System.IO;
using Models = MyApp.Domain.Models;

namespace MyApp
{
    public class Program
    {
        public static void Main()
        {
            var items = new List<int>();
            Console.WriteLine(items.Count);
        }
    }
}
"""


def test_csharp_namespace_table_and_alias():
    assert _removed(CSHARP_PROGRAM, "csharp") == [
        "using System.IO;",
        "using Models = MyApp.Domain.Models;",
    ]


# --- C / C++ ---


CPP_MAIN = """#pragma once
#include <iostream>
#include <vector>
#include <algorithm>
#include <chrono>
#include "app.h"

int main() {
    std::cout << "hi" << std::endl;
    return 0;
}
"""


def test_cpp_header_table():
    assert _removed(CPP_MAIN, "cpp") == ["#include <vector>", "#include <algorithm>"]


def test_cpp_using_namespace_std_keeps_system_headers():
    code = (
        "#include <iostream>\n"
        "#include <vector>\n"
        "#include \"app.h\"\n"
        "\n"
        "using namespace std;\n"
        "\n"
        "int main() { cout << \"hi\" << endl; }\n"
    )
    assert _removed(code, "cpp") == []


def test_c_only_removes_known_headers():
    code = "#include <stdio.h>\n#include <string.h>\n#include <zlib.h>\n\nint main(void) { puts(\"x\"); }\n"
    assert _removed(code, "c") == ["#include <string.h>"]


# --- PHP ---


PHP_REPORT = r"""<?php

namespace App\Reporting;

use App\Services\{
    PdfGenerator,
    EmailService as Mailer
};
use App\Models\{User, Order};
use function App\Helpers\format_money;
use const App\Config\VERSION;

class SalesReport
{
    public function __construct(private Mailer $mailer) {}
}
"""


def test_php_grouped_and_function_imports():
    assert _removed(PHP_REPORT, "php") == [
        r"use App\Models\{User, Order};",
        r"use function App\Helpers\format_money;",
        r"use const App\Config\VERSION;",
    ]


# --- Ruby ---


RUBY_SCRIPT = """require 'json'
require 'set'
require 'fileutils'
require_relative 'lib/helper'
autoload :Parser, 'parser'

data = JSON.parse(input)
"""


def test_ruby_requires():
    assert _removed(RUBY_SCRIPT, "ruby") == [
        "require 'set'",
        "require 'fileutils'",
        "autoload :Parser, 'parser'",
    ]


def test_ruby_begin_end_block_skipped():
    code = "=begin\nrequire 'csv'\n=end\nrequire 'csv'\n\nputs 1\n"
    result = filter_imports(code, "ruby")
    assert result.removed == ["require 'csv'"]
    assert result.code == "=begin\nrequire 'csv'\n=end\n\nputs 1\n"


# --- Rust ---


RUST_MAIN = """use std::collections::{HashMap, HashSet};
use std::fmt;
use std::io::{self, Write};
use serde::{
    Deserialize,
    Serialize,
};
extern crate rand;

fn main() {
    let m: HashMap<u8, u8> = HashMap::new();
}
"""


def test_rust_use_trees():
    assert _removed(RUST_MAIN, "rust") == [
        "use std::fmt;",
        "use serde::{\n    Deserialize,\n    Serialize,\n};",
        "extern crate rand;",
    ]
