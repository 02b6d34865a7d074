"""Stack strings captured from real runtimes, one per dialect."""

CHROME_15 = {
    "message": "Object #<Object> has no method 'undefined'",
    "stack": (
        "TypeError: Object #<Object> has no method 'undefined'\n"
        "    at bar (http://path/to/file.js:13:17)\n"
        "    at bar (http://path/to/file.js:16:5)\n"
        "    at foo (http://path/to/file.js:20:5)\n"
        "    at http://path/to/file.js:24:4"
    ),
}

CHROME_EVAL = {
    "message": "BEEP BEEP",
    "stack": (
        "Error: BEEP BEEP\n"
        "    at eval (eval at <anonymous> (http://localhost:8080/file.js:21:5), <anonymous>:1:1)\n"
        "    at new Foo (http://localhost:8080/file.js:21:5)\n"
        "    at Array.forEach (native)\n"
        "    at async Promise.all (index 0)\n"
        "    at http://localhost:8080/file.js:31:13"
    ),
}

FIREFOX_31 = {
    "message": "Default error",
    "stack": (
        "foo@http://path/to/file.js:41:13\n"
        "bar@http://path/to/file.js:1:1\n"
        ".plugin/e.fn[c]/<@http://path/to/file.js:1:1\n"
    ),
}

FIREFOX_EVAL = {
    "message": "BEEP BEEP",
    "stack": (
        "baz@http://localhost:8080/file.js line 26 > eval line 2 > eval:1:30\n"
        "foo@http://localhost:8080/file.js line 26 > eval:1:30\n"
        "@http://localhost:8080/file.js:33:9"
    ),
}

SAFARI_8 = {
    "message": "null is not an object (evaluating 'x.undef')",
    "stack": (
        "bar@http://path/to/file.js:12:57\n"
        "foo@http://path/to/file.js:8:58\n"
        "global code@http://path/to/file.js:3:45\n"
        "eval code\n"
        "eval@[native code]"
    ),
}

IE_11 = {
    "message": "'x' is undefined",
    "stack": (
        "ReferenceError: 'x' is undefined\n"
        "   at Anonymous function (http://path/to/file.js:47:21)\n"
        "   at foo (http://path/to/file.js:45:13)\n"
        "   at bar (http://path/to/file.js:108:1)"
    ),
}

OPERA_11 = {
    "message": "'this.undef' is not a function",
    "stack": (
        "<anonymous function: run>([arguments not available])@http://path/to/file.js:27\n"
        "bar([arguments not available])@http://domain.com:1234/path/to/file.js:18\n"
        "foo(a,b)@http://domain.com:1234/path/to/file.js:11\n"
        "<anonymous function>@http://path/to/file.js:15\n"
        "Error created at <anonymous function>@http://path/to/file.js:15"
    ),
}

OPERA_10 = {
    "message": "Statement on line 42: Type mismatch",
    "stack": (
        "  Line 42 of linked script http://path/to/file.js: In function foo\n"
        "    this.undef();\n"
        "  Line 27 of linked script http://path/to/file.js: In function bar\n"
        "    foo();\n"
        "  Line 11 of linked script http://path/to/file.js\n"
        "    bar();"
    ),
}

# Opera 9 has no stack property; the backtrace is part of the message.
OPERA_9 = {
    "message": (
        "Statement on line 44: Type mismatch (usually a non-object value used where an object is required)\n"
        "Backtrace:\n"
        "  Line 44 of linked script http://path/to/file.js\n"
        "    this.undef();\n"
        "  Line 31 of linked script http://path/to/file.js\n"
        "    ex = ex || this.createException();\n"
        "  Line 4 of inline#1 script in http://path/to/file.js\n"
        "    printTrace(foo());\n"
        "  Line 11 of linked script http://path/to/file.js\n"
        "    bar();"
    ),
}

# A minified file whose source map sends 1:38 back to file.js 3:4.
MINIFIED_URL = "http://path/to/file.min.js"
MINIFIED_SOURCE = (
    "function increment(){someVariable+=2;null.x()}var someVariable=2;increment();\n"
    "//# sourceMappingURL=file.min.js.map"
)
MINIFIED_MAP_URL = "http://path/to/file.min.js.map"
MINIFIED_MAP = (
    '{"version":3,"file":"file.min.js","sources":["file.js"],'
    '"names":["increment","someVariable","x"],'
    '"mappings":"AAAA,QAASA,aACLC,cAAgB,CAChB,MAAKC,IAET,GAAID,cAAe,CACnBD"}'
)
MINIFIED_ERROR = {
    "message": "Cannot read property 'x' of null",
    "stack": (
        "TypeError: Cannot read property 'x' of null\n"
        "    at http://path/to/file.min.js:1:38"
    ),
}
