from __future__ import annotations
import json
from pathlib import Path
from typing import List, Dict, Any
from ..config import SimConfig
from ..runtime.engine import Outcome
from ..runtime.stats import StatisticsCollector
from . import viz


def format_outcome(outcome: Outcome) -> str:
    """Renders an outcome the way csim's verbose mode does, e.g. 'M 20,1 miss eviction hit'."""
    parts = [outcome.event.label]
    if outcome.miss:
        parts.append("miss")
    if outcome.eviction:
        parts.append("eviction")
    parts.extend(["hit"] * outcome.hits)
    return " ".join(parts)


def _set_rows(stats: StatisticsCollector, config: SimConfig) -> List[Dict[str, Any]]:
    rows = []
    for set_index in sorted(stats.per_set):
        set_stats = stats.per_set[set_index]
        occupied = stats.occupancy[set_index] if set_index < len(stats.occupancy) else 0
        rows.append({
            "set": set_index,
            "hits": set_stats.hits,
            "misses": set_stats.misses,
            "evictions": set_stats.evictions,
            "occupied_lines": occupied,
            "lines_per_set": config.lines_per_set,
        })
    return rows


def generate_report_json(outcomes: List[Outcome], config: SimConfig, stats: StatisticsCollector) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary from the run outcomes."""
    events = []
    for outcome in outcomes:
        entry = {
            'op': str(outcome.op),
            'address': f"0x{outcome.event.address:x}",
            'size': outcome.event.size,
            'set': outcome.set_index,
            'line': outcome.line_index,
            'tag': f"0x{outcome.tag:x}",
            'hits': outcome.hits,
            'miss': outcome.miss,
            'eviction': outcome.eviction,
        }
        if outcome.evicted_address is not None:
            entry['evicted_address'] = f"0x{outcome.evicted_address:x}"
        events.append(entry)

    report_data = {
        "config": dict(config.__dict__),
        "num_sets": config.geometry.num_sets,
        "per_set": _set_rows(stats, config),
        "events": events,
    }
    report_data.update(stats.to_dict())
    return report_data


def generate_report(outcomes: List[Outcome], config: SimConfig, stats: StatisticsCollector):
    """Generates all report artifacts."""
    report_data = generate_report_json(outcomes, config, stats)
    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)

    viz.export_set_activity(report_data['per_set'], str(output_dir / "report.html"))

    print(viz.export_set_activity_ascii(report_data['per_set']))

    print(f"\nReports generated in {output_dir.absolute()}")
    print(f"Hit rate: {report_data['hit_rate']:.2%}")
    if report_data['op_counts']:
        print("\nData accesses:")
        for key, value in report_data['op_counts'].items():
            print(f"  {key:<7}: {value}")
