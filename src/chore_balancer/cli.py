from __future__ import annotations

import argparse
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

try:  # pragma: no cover - optional dependency handled at runtime
    import argcomplete
except ImportError:  # pragma: no cover
    argcomplete = None  # type: ignore[assignment]

from .catalog import add_chore, add_person, remove_chore, remove_person, update_chore, update_policy
from .config import config_exists, dump_config, ensure_config_dir, get_config_path, load_config_file
from .engine import InvalidInput, allocate
from .exporter import ExportPlan, write_exports
from .generator import InitParams, parse_person, write_config
from .models import Cadence, CycleResult, HouseholdConfigModel
from .resources import list_templates, load_default_config


def _cmd_init(sp):
    # Use default config location if no outfile specified
    if sp.outfile is None:
        ensure_config_dir()
        outfile = get_config_path()
    else:
        outfile = Path(sp.outfile)

    params = InitParams(
        people=[parse_person(p) for p in sp.person],
        template=sp.template,
        outfile=outfile,
        overwrite=sp.force,
        cycle_weeks=sp.weeks,
    )
    try:
        out = write_config(params)
    except FileExistsError as exc:
        raise SystemExit(f"{exc}\nUse -f/--force to overwrite") from exc
    print(f"Wrote household config → {out}")


def _read_config(path: Path) -> HouseholdConfigModel:
    try:
        return load_config_file(path)
    except (ValidationError, yaml.YAMLError) as exc:
        raise SystemExit(f"Invalid configuration in {path}:\n{exc}") from exc


def _load_config(config_arg: str | None) -> HouseholdConfigModel:
    """
    Load config from specified path, default location, or packaged template.

    Priority:
    1. Specified config path (if provided and exists)
    2. Default user config (~/.config/chore-balancer/household.yaml or household.json)
    3. Packaged generic template
    """
    if config_arg:
        cfg_path = Path(config_arg)
        if cfg_path.exists():
            return _read_config(cfg_path)

    if config_exists():
        return _read_config(get_config_path())

    return load_default_config()


def _editable_config_path(config_arg: str | None) -> Path:
    path = Path(config_arg) if config_arg else get_config_path()
    if not path.exists():
        raise SystemExit(f"Config file not found: {path}\nRun `chore-balancer init` first or pass --config")
    return path


def _run_allocation(sp) -> tuple[HouseholdConfigModel, CycleResult]:
    cfg = _load_config(sp.config)
    weeks = sp.weeks if sp.weeks is not None else cfg.cycle_weeks
    try:
        result = allocate(cfg.people, cfg.chores, weeks, cfg.policy)
    except InvalidInput as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc
    return cfg, result


def _print_table(cfg: HouseholdConfigModel, result: CycleResult) -> None:
    for week in result.weeks:
        print(f"Week {week.week}")
        for person in cfg.people:
            chores = ", ".join(a.chore_name + ("*" if a.shared else "") for a in week.for_person(person.name)) or "-"
            print(f"  {person.name:<12} {week.counts[person.name]:>2} chores  load {week.loads[person.name]:>3}  {chores}")
        for u in week.unassigned:
            print(f"  (unassigned) {u.chore_name}")
    unmet = result.unmet_bounds()
    if unmet:
        print("Out of bounds:")
        for b in unmet:
            print(f"  week {b.week}: {b.person} has {b.count} (target {b.minimum}-{b.maximum})")


def _cmd_allocate(sp):
    cfg, result = _run_allocation(sp)
    if sp.format == "table":
        _print_table(cfg, result)
    else:
        print(result.model_dump_json(indent=2))


def _cmd_export(sp):
    cfg, result = _run_allocation(sp)
    fmts = tuple(dict.fromkeys(f.lower() for f in sp.formats))  # unique, normalized
    plan = ExportPlan(outdir=Path(sp.outdir), formats=fmts)
    paths = write_exports(plan, result, cfg)
    print("Exported:")
    for k, p in paths.items():
        print(f"  {k}: {p}")


def _cmd_list(sp):
    print("Available templates:")
    for t in list_templates():
        print("  -", t)


def _cmd_convert(sp):
    """Convert a config file from JSON to YAML or vice versa."""
    input_path = Path(sp.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")

    if sp.output:
        output_path = Path(sp.output)
    elif input_path.suffix == ".json":
        output_path = input_path.with_suffix(".yaml")
    else:
        output_path = input_path.with_suffix(".json")

    if output_path.exists() and not sp.force:
        raise SystemExit(f"Output file already exists: {output_path}\nUse -f/--force to overwrite")

    dump_config(_read_config(input_path), output_path)
    print(f"Converted {input_path} → {output_path}")


def _cmd_add_chore(sp):
    path = _editable_config_path(sp.config)
    cfg, chore = add_chore(_read_config(path), sp.name, area=sp.area, weight=sp.weight, cadence=sp.cadence)
    dump_config(cfg, path)
    print(f"Added chore #{chore.id} '{chore.name}' ({chore.cadence}, weight {chore.weight}) → {path}")


def _cmd_remove_chore(sp):
    path = _editable_config_path(sp.config)
    try:
        cfg = remove_chore(_read_config(path), sp.chore_id)
    except KeyError as exc:
        raise SystemExit(exc.args[0]) from exc
    dump_config(cfg, path)
    print(f"Removed chore #{sp.chore_id} → {path}")


def _cmd_update_chore(sp):
    changes = {k: v for k, v in (("name", sp.name), ("area", sp.area), ("weight", sp.weight), ("cadence", sp.cadence)) if v is not None}
    if not changes:
        raise SystemExit("Nothing to update: pass at least one of --name, --area, --weight, --cadence")
    path = _editable_config_path(sp.config)
    try:
        cfg = update_chore(_read_config(path), sp.chore_id, **changes)
    except KeyError as exc:
        raise SystemExit(exc.args[0]) from exc
    except ValueError as exc:
        raise SystemExit(f"Invalid chore: {exc}") from exc
    dump_config(cfg, path)
    chore = next(c for c in cfg.chores if c.id == sp.chore_id)
    print(f"Updated chore #{chore.id} '{chore.name}' ({chore.cadence}, weight {chore.weight}) → {path}")


def _cmd_add_person(sp):
    path = _editable_config_path(sp.config)
    try:
        person = parse_person(sp.person)
        cfg = add_person(_read_config(path), person)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    dump_config(cfg, path)
    print(f"Added {person.name} to the roster → {path}")


def _cmd_remove_person(sp):
    path = _editable_config_path(sp.config)
    try:
        cfg = remove_person(_read_config(path), sp.name)
    except KeyError as exc:
        raise SystemExit(exc.args[0]) from exc
    dump_config(cfg, path)
    print(f"Removed {sp.name} from the roster → {path}")


def _cmd_set_policy(sp):
    fields = {
        "min_per_week": sp.min,
        "max_per_week": sp.max,
        "avoid_immediate_repeat": sp.avoid_repeat,
        "no_duplicate_per_week": sp.dedupe,
        "group_period_weeks": sp.group_period,
    }
    changes = {k: v for k, v in fields.items() if v is not None}
    if not changes and sp.weeks is None:
        raise SystemExit("Nothing to update: pass at least one setting (see --help)")
    path = _editable_config_path(sp.config)
    try:
        cfg = update_policy(_read_config(path), cycle_weeks=sp.weeks, **changes)
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc
    dump_config(cfg, path)
    p = cfg.policy
    print(f"Policy: {p.min_per_week}-{p.max_per_week} chores per person per week, {cfg.cycle_weeks}-week cycle → {path}")


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        return
    level = logging.DEBUG if verbosity > 1 else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main():
    ap = argparse.ArgumentParser(description="chore-balancer CLI")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Log allocation details (-vv for debug)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    config_help = "Config file (default: ~/.config/chore-balancer/household.yaml or the generic template)"
    edit_help = "Config file to edit (default: ~/.config/chore-balancer/household.yaml)"

    ap_init = sub.add_parser("init", help="Generate a new household config")
    ap_init.add_argument("--person", action="append", required=True, help="NAME or NAME:CONTACT (repeatable)")
    ap_init.add_argument("--template", default="generic", choices=list_templates())
    ap_init.add_argument("--weeks", type=int, default=None, help="Cycle length in weeks (default: from template)")
    ap_init.add_argument("-o", "--outfile", default=None, help="Output file (default: ~/.config/chore-balancer/household.yaml)")
    ap_init.add_argument("-f", "--force", action="store_true")
    ap_init.set_defaults(func=_cmd_init)

    ap_alloc = sub.add_parser("allocate", help="Allocate chores for the whole cycle")
    ap_alloc.add_argument("--config", default=None, help=config_help)
    ap_alloc.add_argument("--weeks", type=int, default=None, help="Override the configured cycle length")
    ap_alloc.add_argument("--format", choices=["json", "table"], default="table")
    ap_alloc.set_defaults(func=_cmd_allocate)

    ap_exp = sub.add_parser("export", help="Write the cycle allocation to files")
    ap_exp.add_argument("--config", default=None, help=config_help)
    ap_exp.add_argument("--weeks", type=int, default=None, help="Override the configured cycle length")
    ap_exp.add_argument("--outdir", default="out", help="Output directory (default: ./out)")
    ap_exp.add_argument(
        "--formats",
        nargs="+",
        default=["csv", "json", "jsonl", "md"],
        choices=["csv", "json", "jsonl", "md", "png"],
        help="One or more of: csv json jsonl md png",
    )
    ap_exp.set_defaults(func=_cmd_export)

    ap_list = sub.add_parser("list-templates", help="Show available templates")
    ap_list.set_defaults(func=_cmd_list)

    ap_convert = sub.add_parser("convert", help="Convert config file between JSON and YAML formats")
    ap_convert.add_argument("input", help="Input config file (.json, .yaml, or .yml)")
    ap_convert.add_argument("-o", "--output", help="Output file (default: auto-detect based on input)")
    ap_convert.add_argument("-f", "--force", action="store_true", help="Overwrite output file if it exists")
    ap_convert.set_defaults(func=_cmd_convert)

    ap_add = sub.add_parser("add-chore", help="Add a chore to the catalog")
    ap_add.add_argument("name")
    ap_add.add_argument("--area", default=None)
    ap_add.add_argument("--weight", type=int, default=1, help="Relative effort 1-5 (clamped)")
    ap_add.add_argument("--cadence", default=Cadence.WEEKLY.value, choices=[c.value for c in Cadence])
    ap_add.add_argument("--config", default=None, help=edit_help)
    ap_add.set_defaults(func=_cmd_add_chore)

    ap_rm = sub.add_parser("remove-chore", help="Remove a chore from the catalog by id")
    ap_rm.add_argument("chore_id", type=int)
    ap_rm.add_argument("--config", default=None, help=edit_help)
    ap_rm.set_defaults(func=_cmd_remove_chore)

    ap_upd = sub.add_parser("update-chore", help="Change a chore's name, area, weight or cadence")
    ap_upd.add_argument("chore_id", type=int)
    ap_upd.add_argument("--name", default=None)
    ap_upd.add_argument("--area", default=None)
    ap_upd.add_argument("--weight", type=int, default=None, help="Relative effort 1-5 (clamped)")
    ap_upd.add_argument("--cadence", default=None, choices=[c.value for c in Cadence])
    ap_upd.add_argument("--config", default=None, help=edit_help)
    ap_upd.set_defaults(func=_cmd_update_chore)

    ap_addp = sub.add_parser("add-person", help="Add someone to the roster")
    ap_addp.add_argument("person", help="NAME or NAME:CONTACT")
    ap_addp.add_argument("--config", default=None, help=edit_help)
    ap_addp.set_defaults(func=_cmd_add_person)

    ap_rmp = sub.add_parser("remove-person", help="Remove someone from the roster")
    ap_rmp.add_argument("name")
    ap_rmp.add_argument("--config", default=None, help=edit_help)
    ap_rmp.set_defaults(func=_cmd_remove_person)

    ap_pol = sub.add_parser("set-policy", help="Change the per-week chore bounds and other allocation settings")
    ap_pol.add_argument("--min", type=int, default=None, help="Minimum chores per person per week")
    ap_pol.add_argument("--max", type=int, default=None, help="Maximum chores per person per week")
    ap_pol.add_argument("--avoid-repeat", action=argparse.BooleanOptionalAction, default=None, help="Avoid giving a chore to last week's assignee")
    ap_pol.add_argument("--dedupe", action=argparse.BooleanOptionalAction, default=None, help="At most one occurrence of a chore per person per week")
    ap_pol.add_argument("--group-period", type=int, default=None, choices=[4, 12], help="Weeks between quarterly chores")
    ap_pol.add_argument("--weeks", type=int, default=None, help="Cycle length in weeks")
    ap_pol.add_argument("--config", default=None, help=edit_help)
    ap_pol.set_defaults(func=_cmd_set_policy)

    if argcomplete is not None:
        argcomplete.autocomplete(ap)

    args = ap.parse_args()
    _configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
