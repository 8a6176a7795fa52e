"""
Library to match a flat list of tokens, such as command line arguments, against a declarative grammar table.

See the objects for more explanations.

Defining a grammar table:
```
verbose = Flag()
out_found, out = Flag(), Value()
files_found, files = Flag(), Values()

table = [
    GrammarEntry("--verbose", verbose),                 # no values
    GrammarEntry("--out", out_found, 1, 1, out),        # exactly one value
    GrammarEntry("--files", files_found, 1, 3, files),  # one to three values
]
```

Matching:
```
outcome = match(["--files", "a", "b", "--verbose"], table)
if outcome:
    ... # `files` is ["a", "b", ""], `verbose` is set
else:
    print(format_status(outcome))   # e.g. `Unknown token: Token "--oops"`
```

Checking which tokens were required after matching:
```
outcome = classify_tokens(table, "--files", "--verbose --out")
if not outcome:
    print(format_status(outcome))   # e.g. `Mandatory token missing: Token "--files"`
```
"""

import tokparse.const as const
import tokparse.main
from tokparse.const import (
    StatusCode,
    STATUS_MESSAGES,
)
from tokparse.main import (
    Flag,
    FoundFlag,
    ArgBinding,
    Value,
    Values,
    GrammarEntry,
    TokenSet,
    Outcome,
    TokenParseError,
    describe_status,
    format_status,
    validate,
    match,
)
from tokparse.config import TokenClasses
from tokparse.general import (
    classify_tokens,
    sanitize_whitespace_values,
)
from tokparse.log import setup_logging
import tokparse.general as general
