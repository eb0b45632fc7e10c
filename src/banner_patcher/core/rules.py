"""
Rules files.

One rule per line, `#` starts a comment:

    car_id: texture.dds
    car_id: texture.dds: dxt1

The optional third field is a preferred output format (see formats.FORMAT_TOKENS);
unknown format names fall back to the global default.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import ConfigurationError
from .formats import parse_format
from .patch_settings import TextureRule


Rules = Dict[str, List[TextureRule]]


def parse_rule_line(line: str) -> Optional[Tuple[str, TextureRule]]:
    """
    Parse one line of a rules file.

    Returns:
        (car_id, rule), or None for blank, comment-only and malformed lines
    """
    parts = line.split('#', 1)[0].split(':')
    if len(parts) not in (2, 3):
        return None

    car_id = parts[0].strip()
    texture_name = parts[1].strip()
    if not car_id or not texture_name:
        return None

    preferred_format = parse_format(parts[2]) if len(parts) == 3 else None
    return car_id, TextureRule(texture_name, preferred_format)


def parse_rules(lines: Iterable[str], rules: Optional[Rules] = None) -> Rules:
    """Group rule lines by car, keeping file order"""
    if rules is None:
        rules = {}
    for line in lines:
        parsed = parse_rule_line(line)
        if parsed:
            car_id, rule = parsed
            rules.setdefault(car_id, []).append(rule)
    return rules


def load_rules(paths: Iterable[Path]) -> Rules:
    """
    Load and merge rules files.

    Raises:
        OSError: If a rules file can't be read
        ConfigurationError: If no rules were found at all
    """
    rules: Rules = {}
    for path in paths:
        with open(path, 'r', encoding='utf-8-sig') as f:
            parse_rules(f, rules)

    if not rules:
        raise ConfigurationError("No rules found")
    return rules
