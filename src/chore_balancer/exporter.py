from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .models import CycleResult, HouseholdConfigModel
from .notifier import compose_cycle_messages

type AssignmentRecord = dict[str, object]
type ExportFormat = Literal["csv", "json", "jsonl", "md", "png"]


@dataclass(slots=True)
class ExportPlan:
    outdir: Path
    formats: tuple[ExportFormat, ...] = (
        "csv",
        "json",
        "jsonl",
        "md",
    )
    prefix: str = "chores"


def assignment_records(result: CycleResult) -> list[AssignmentRecord]:
    out: list[AssignmentRecord] = []
    for week in result.weeks:
        for a in week.assignments:
            out.append(
                {
                    "week": week.week,
                    "person": a.person,
                    "chore_id": a.chore_id,
                    "chore": a.chore_name,
                    "area": a.area,
                    "weight": a.weight,
                    "shared": a.shared,
                }
            )
    return out


def _csv_lines(records: list[AssignmentRecord]) -> list[str]:
    header = ["week", "person", "chore_id", "chore", "area", "weight", "shared"]
    lines = [",".join(header)]
    for r in records:
        row = [
            str(r["week"]),
            str(r["person"]),
            str(r["chore_id"]),
            str(r["chore"]),
            "" if r["area"] is None else str(r["area"]),
            str(r["weight"]),
            "yes" if r["shared"] else "no",
        ]
        # basic CSV escape
        row = [('"' + c.replace('"', '""') + '"') if ("," in c or " " in c or '"' in c) else c for c in row]
        lines.append(",".join(row))
    return lines


def _markdown_summary(result: CycleResult, cfg: HouseholdConfigModel) -> list[str]:
    policy = result.policy
    md = [
        "# Chore Cycle Summary",
        f"- Weeks: **{len(result.weeks)}**",
        f"- People: **{', '.join(p.name for p in cfg.people)}**",
        f"- Chores per person per week: **{policy.min_per_week}-{policy.max_per_week}**",
        "",
    ]
    for week in result.weeks:
        md.extend([f"## Week {week.week}", "", "| Person | Chores | Count | Load |", "|---|---|---:|---:|"])
        for person in cfg.people:
            names = ", ".join(a.chore_name + (" *" if a.shared else "") for a in week.for_person(person.name))
            md.append(f"| {person.name} | {names} | {week.counts.get(person.name, 0)} | {week.loads.get(person.name, 0)} |")
        md.append("")

    totals_count = result.total_counts()
    totals_load = result.total_loads()
    md.extend(["## Totals", "", "| Person | Count | Load |", "|---|---:|---:|"])
    for person in cfg.people:
        md.append(f"| {person.name} | {totals_count.get(person.name, 0)} | {totals_load.get(person.name, 0)} |")
    md.append("")

    unmet = result.unmet_bounds()
    if unmet:
        md.extend(["## Out of bounds", ""])
        md.extend(f"- Week {b.week}: {b.person} has {b.count} (target {b.minimum}-{b.maximum})" for b in unmet)
        md.append("")

    unassigned = result.unassigned()
    if unassigned:
        md.extend(["## Unassigned", ""])
        md.extend(f"- Week {u.week}: {u.chore_name} (weight {u.weight})" for u in unassigned)
        md.append("")

    md.append("`*` marks chores the whole household does together.")
    return md


def write_exports(plan: ExportPlan, result: CycleResult, cfg: HouseholdConfigModel) -> dict[str, Path]:
    plan.outdir.mkdir(parents=True, exist_ok=True)
    stem = f"{plan.prefix}_{len(result.weeks)}w"
    records = assignment_records(result)

    paths: dict[str, Path] = {}

    if "csv" in plan.formats:
        p = plan.outdir / f"{stem}.csv"
        p.write_text("\n".join(_csv_lines(records)), encoding="utf-8")
        paths["csv"] = p

    if "json" in plan.formats:
        p = plan.outdir / f"{stem}.json"
        p.write_text(result.model_dump_json(indent=2), encoding="utf-8")
        paths["json"] = p

    if "jsonl" in plan.formats:
        p = plan.outdir / f"messages_{len(result.weeks)}w.jsonl"
        msgs = compose_cycle_messages(result, cfg.people)
        with p.open("w", encoding="utf-8") as f:
            for m in msgs:
                f.write(json.dumps(m, ensure_ascii=False) + "\n")
        paths["jsonl"] = p

    if "md" in plan.formats:
        p = plan.outdir / f"summary_{len(result.weeks)}w.md"
        p.write_text("\n".join(_markdown_summary(result, cfg)), encoding="utf-8")
        paths["md"] = p

    if "png" in plan.formats:
        png_path = plan.outdir / f"visual_{len(result.weeks)}w.png"
        from .visualizer import render_cycle_image

        render_cycle_image(result, cfg.people, png_path, palette=cfg.visualization)
        paths["png"] = png_path

    return paths
