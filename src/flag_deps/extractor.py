#!/usr/bin/env python3
"""
Dependency Extractor
Finds flags whose rules reference other flags through IN_SPLIT matchers.
"""

import json
from pathlib import Path
from typing import List, Sequence, Union

from .exceptions import FlagDataNotFoundError, MalformedFlagDataError
from .models import Dependency, FlagDefinition, parse_flag_export


def load_flag_export(path: Union[str, Path]) -> List[FlagDefinition]:
    """Read a flag export JSON file and parse its `objects`."""
    path = Path(path)
    try:
        with open(path, encoding='utf-8') as f:
            document = json.load(f)
    except FileNotFoundError as e:
        raise FlagDataNotFoundError(f"Flag export not found: {path}", cause=e) from e
    except json.JSONDecodeError as e:
        raise MalformedFlagDataError(f"Flag export is not valid JSON: {path}", cause=e) from e
    except UnicodeDecodeError as e:
        raise MalformedFlagDataError(f"Flag export is not valid UTF-8: {path}", cause=e) from e
    except OSError as e:
        raise FlagDataNotFoundError(f"Could not read flag export: {path}", cause=e) from e

    return parse_flag_export(document)


def extract_dependencies(flags: Sequence[FlagDefinition]) -> List[Dependency]:
    """Return one edge per IN_SPLIT matcher that points at a known flag.

    Edges come out in flag, rule, matcher order. References to names not
    present in `flags` are dropped. Duplicates and self-references are kept.
    """
    known_names = {flag.name for flag in flags}

    dependencies = []
    for flag in flags:
        for rule in flag.rules:
            if rule.condition is None:
                continue
            for matcher in rule.condition.matchers:
                if matcher.is_flag_reference and matcher.split_name in known_names:
                    dependencies.append(Dependency(flag.name, matcher.split_name))

    return dependencies
