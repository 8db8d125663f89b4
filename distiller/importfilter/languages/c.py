"""C include filter."""

from __future__ import annotations

from distiller.importfilter.languages.cpp import CppImportFilter

# Only headers listed here are ever removed
C_HEADER_USAGE: dict[str, tuple[str, ...]] = {
    "stdio.h": ("printf", "fprintf", "sprintf", "snprintf", "scanf", "fopen", "fclose", "fgets", "puts", "putchar", "getchar", "FILE", "stdin", "stdout", "stderr", "EOF"),
    "stdlib.h": ("malloc", "calloc", "realloc", "free", "exit", "atoi", "atol", "strtol", "abs", "qsort", "rand", "srand", "getenv", "EXIT_SUCCESS", "EXIT_FAILURE", "NULL"),
    "string.h": ("strlen", "strcpy", "strncpy", "strcat", "strcmp", "strncmp", "strchr", "strstr", "strdup", "memcpy", "memmove", "memset", "memcmp"),
    "math.h": ("sqrt", "pow", "sin", "cos", "tan", "floor", "ceil", "fabs", "log", "exp", "round", "M_PI"),
    "stdbool.h": ("bool", "true", "false"),
    "stdint.h": ("int8_t", "int16_t", "int32_t", "int64_t", "uint8_t", "uint16_t", "uint32_t", "uint64_t", "intptr_t", "uintptr_t", "SIZE_MAX", "INT32_MAX"),
    "assert.h": ("assert", "static_assert"),
    "ctype.h": ("isalpha", "isdigit", "isspace", "isupper", "islower", "isalnum", "toupper", "tolower"),
    "time.h": ("time", "clock", "time_t", "clock_t", "difftime", "strftime", "localtime", "CLOCKS_PER_SEC"),
    "errno.h": ("errno", "EINVAL", "ENOMEM", "ENOENT", "EAGAIN"),
    "unistd.h": ("sleep", "usleep", "read", "write", "close", "fork", "getpid", "access", "unlink"),
    "pthread.h": ("pthread_create", "pthread_join", "pthread_mutex_t", "pthread_mutex_lock", "pthread_mutex_unlock", "pthread_t"),
}


class CImportFilter(CppImportFilter):
    """``#include`` directives for C.

    Headers outside the table are kept: C headers declare free functions
    and macros that no short list can cover.
    """

    language = "c"
    aliases = ("h",)
    usage_table = C_HEADER_USAGE

    def analyzable(self, header: str) -> bool:
        return header in self.usage_table

    def aggregate_patterns(self, imp):
        return self.usage_table.get(imp.module, ())
