from .models import (
    Cadence, Chore, Person, Policy, Assignment, UnassignedOccurrence, UnmetBound,
    WeekAssignment, CycleResult, HouseholdConfigModel, VisualizationPalette
)
from .cadence import occurrences, is_group_cadence, monthly_ranks
from .expander import Occurrence, WeekOccurrences, expand_week
from .balancer import WeekLedger, assign_group, balance_greedy
from .repair import RepairMove, repair_bounds
from .engine import InvalidInput, allocate, allocate_week
from .catalog import next_chore_id, add_chore, update_chore, remove_chore, add_person, remove_person, update_policy
from .resources import load_default_config, default_config_text, list_templates, load_template
from .generator import generate_config, write_config, InitParams
from .notifier import compose_message, compose_cycle_messages
from .visualizer import render_cycle_image

__all__ = [
    "Cadence","Chore","Person","Policy","Assignment","UnassignedOccurrence","UnmetBound",
    "WeekAssignment","CycleResult","HouseholdConfigModel","VisualizationPalette",
    "occurrences","is_group_cadence","monthly_ranks",
    "Occurrence","WeekOccurrences","expand_week",
    "WeekLedger","assign_group","balance_greedy",
    "RepairMove","repair_bounds",
    "InvalidInput","allocate","allocate_week",
    "next_chore_id","add_chore","update_chore","remove_chore","add_person","remove_person","update_policy",
    "load_default_config","default_config_text","list_templates","load_template",
    "generate_config","write_config","InitParams",
    "compose_message","compose_cycle_messages","render_cycle_image"
]
