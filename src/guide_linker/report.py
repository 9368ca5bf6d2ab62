"""
Enhancement reporting.

Summarizes the results of enhancing several guides: success counts,
link statistics, the links-per-guide distribution and the most
frequently linked catalog items.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console
from rich.table import Table

from .models import BlendingResult

TOP_ITEMS_LIMIT = 10


@dataclass
class EnhancementOutcome:
    """Result of enhancing one guide."""
    source: str
    result: Optional[BlendingResult] = None
    success: bool = True
    error: Optional[str] = None


@dataclass
class EnhancementReport:
    """Aggregated statistics over several enhancement outcomes."""
    total: int = 0
    successful: int = 0
    failed: int = 0
    total_links: int = 0
    links_per_guide: dict[int, int] = field(default_factory=dict)
    top_items: list[tuple[str, int]] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)

    @property
    def average_links(self) -> float:
        if not self.successful:
            return 0.0
        return self.total_links / self.successful


def build_report(outcomes: list[EnhancementOutcome]) -> EnhancementReport:
    """
    Aggregate enhancement outcomes into a report.

    Args:
        outcomes: One outcome per processed guide.

    Returns:
        EnhancementReport.
    """
    report = EnhancementReport(total=len(outcomes))
    distribution: Counter = Counter()
    item_counts: Counter = Counter()

    for outcome in outcomes:
        if not outcome.success or outcome.result is None:
            report.failed += 1
            report.failures.append((outcome.source, outcome.error or "Unknown error"))
            continue

        report.successful += 1
        links = outcome.result.inserted_links
        report.total_links += len(links)
        distribution[len(links)] += 1
        item_counts.update(link.item.name for link in links)

    report.links_per_guide = dict(sorted(distribution.items()))
    report.top_items = item_counts.most_common(TOP_ITEMS_LIMIT)
    return report


def render_report(report: EnhancementReport, console: Optional[Console] = None) -> None:
    """Print a report as rich tables."""
    console = console or Console()
    console.print("\n[bold blue]Catalog Link Enhancement Report[/bold blue]")

    summary = Table(show_header=False)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green")
    summary.add_row("Total guides processed", str(report.total))
    summary.add_row("Successfully enhanced", str(report.successful))
    summary.add_row("Failed", str(report.failed))
    summary.add_row("Total links inserted", str(report.total_links))
    summary.add_row("Average links per guide", f"{report.average_links:.1f}")
    console.print(summary)

    if report.links_per_guide:
        distribution = Table(title="Links per guide", show_header=True)
        distribution.add_column("Links", style="cyan")
        distribution.add_column("Guides", style="green")
        for links, guides in report.links_per_guide.items():
            distribution.add_row(str(links), str(guides))
        console.print(distribution)

    if report.top_items:
        items = Table(title="Most frequently linked items", show_header=True)
        items.add_column("Item", style="cyan")
        items.add_column("Times", style="green")
        for name, count in report.top_items:
            items.add_row(name, str(count))
        console.print(items)

    for source, error in report.failures:
        console.print(f"[red]Failed:[/red] {source}: {error}")
