"""CLI command implementations."""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .blocklist import RuleType, is_enabled_for, suggest_rule_value
from .config import load_settings
from .core.labels import HintLabelAllocator
from .core.state import Mode
from .engine.actions import ACTIONS
from .engine.keymap import KeymapManager
from .stores import SettingsStore

_MODES = {
    "normal": Mode.NORMAL,
    "caret": Mode.VISUAL_CARET,
    "visual": Mode.VISUAL_RANGE,
}


def _store(args: Namespace) -> SettingsStore:
    if getattr(args, "settings", None):
        return SettingsStore(Path(args.settings).expanduser())
    return SettingsStore.get_instance()


def cmd_labels(args: Namespace) -> int:
    settings = load_settings(_store(args))
    alphabet = args.alphabet or settings.hint_alphabet
    try:
        allocator = HintLabelAllocator(alphabet, single_char=not args.no_single)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    labels = allocator.allocate(args.count)
    print(" ".join(labels))
    if args.count > len(labels):
        print(f"{args.count - len(labels)} candidates would get no label", file=sys.stderr)
    return 0


def cmd_keys(args: Namespace) -> int:
    manager = KeymapManager(settings_store=_store(args))
    manager.initialize()
    bindings = manager.bindings

    table = Table(title="Key bindings")
    table.add_column("Mode", style="dim")
    table.add_column("Chord", style="bold yellow")
    table.add_column("Action")
    table.add_column("Description")

    for name, mode in _MODES.items():
        if args.mode and args.mode != name:
            continue
        for binding in bindings.get(mode, []):
            table.add_row(name, binding.chord, binding.action, ACTIONS[binding.action].description)

    Console().print(table)
    return 0


def cmd_check_url(args: Namespace) -> int:
    settings = load_settings(_store(args))
    if is_enabled_for(args.url, settings.disabled_globally, settings.blocklist):
        print(f"enabled: {args.url}")
        return 0

    if settings.disabled_globally:
        print(f"disabled: {args.url} (disabled globally)")
    else:
        rule = next(rule for rule in settings.blocklist.rules if rule.matches(args.url))
        print(f"disabled: {args.url} (rule {rule.id}: {rule.type.value} {rule.value})")
    return 0


def cmd_block_list(args: Namespace) -> int:
    settings = load_settings(_store(args))
    if not len(settings.blocklist):
        print("No rules.")
        return 0

    table = Table()
    table.add_column("Id", style="dim")
    table.add_column("Type")
    table.add_column("Value")
    table.add_column("Enabled")
    for rule in settings.blocklist.rules:
        table.add_row(rule.id, rule.type.value, rule.value, "yes" if rule.enabled else "no")
    Console().print(table)
    return 0


def cmd_block_add(args: Namespace) -> int:
    store = _store(args)
    settings = load_settings(store)
    rule_type = RuleType(args.type)

    value = args.value
    if not value and args.url:
        value = suggest_rule_value(rule_type, args.url)
    if not value:
        print("Error: a rule value or --url is required", file=sys.stderr)
        return 1

    rule = settings.blocklist.add(rule_type, value)
    if rule is None:
        print(f"Rule already exists: {rule_type.value} {value}")
        return 0
    store.set("blocklist", settings.blocklist.to_list())
    print(f"Added rule {rule.id}: {rule.type.value} {rule.value}")
    return 0


def cmd_block_toggle(args: Namespace) -> int:
    store = _store(args)
    settings = load_settings(store)
    if not settings.blocklist.toggle(args.id):
        print(f"Error: no rule with id {args.id}", file=sys.stderr)
        return 1
    store.set("blocklist", settings.blocklist.to_list())
    return 0


def cmd_block_delete(args: Namespace) -> int:
    store = _store(args)
    settings = load_settings(store)
    if not settings.blocklist.delete(args.id):
        print(f"Error: no rule with id {args.id}", file=sys.stderr)
        return 1
    store.set("blocklist", settings.blocklist.to_list())
    return 0


def cmd_demo(args: Namespace) -> int:
    from .textual_host.demo import run_demo

    store = _store(args)
    manager = KeymapManager(settings_store=store)
    manager.initialize()
    run_demo(load_settings(store), config_source=store, keymap=manager)
    return 0
