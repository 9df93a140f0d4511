"""Main CLI entry point for StoryVerse narrative extraction."""
import json
from pathlib import Path

import click
from anthropic import Anthropic
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from utils.logger import setup_logger
from storage.database import Database
from storage.persistence import PersistenceAdapter
from ingestion.loader import StoryLoader, StoryLoadError
from ingestion.models import ExtractionOptions
from extraction.enrichment import LLMEnricher
from extraction.errors import ExtractionError
from extraction.fixtures import DEMO_CHARACTER_OVERRIDES
from extraction.models import ExtractionResult
from extraction.pipeline import ExtractionPipeline, analyze_text
from extraction.profiles import PROFILES, get_profile
import config

logger = setup_logger(__name__)
console = Console()


def build_pipeline(profile_name: str, enrich: bool, demo_overrides: bool, db: Database = None) -> ExtractionPipeline:
    """Assemble a pipeline from CLI options.

    Args:
        profile_name: ``server`` or ``client``
        enrich: Whether to configure the LLM enricher
        demo_overrides: Apply the bundled sample character overrides
        db: Database used as the duplicate checker, if any

    Returns:
        Configured ExtractionPipeline
    """
    enricher = None
    if enrich:
        if not config.ANTHROPIC_API_KEY:
            console.print("[yellow]ANTHROPIC_API_KEY not set; running without enrichment[/yellow]")
        else:
            enricher = LLMEnricher(Anthropic(api_key=config.ANTHROPIC_API_KEY))

    return ExtractionPipeline(
        profile=get_profile(profile_name),
        duplicate_checker=db.character_exists if db else None,
        character_overrides=DEMO_CHARACTER_OVERRIDES if demo_overrides else None,
        enricher=enricher,
    )


def print_summary(result: ExtractionResult) -> None:
    """Print entity counts and the top characters."""
    table = Table(show_header=False)
    table.add_row("Title", result.story_title)
    table.add_row("Format", result.detected_format)
    table.add_row("Profile", result.profile)
    table.add_row("Characters", str(len(result.characters)))
    table.add_row("Locations", str(len(result.locations)))
    table.add_row("Items", str(len(result.items)))
    table.add_row("Events", str(len(result.events)))
    table.add_row("Scenes", str(len(result.scenes)))
    table.add_row("Plotlines", str(len(result.plotlines)))
    table.add_row("Relationships", str(len(result.character_relationships)))
    table.add_row("Dependencies", str(len(result.event_dependencies)))
    table.add_row("Arcs", str(len(result.character_arcs)))
    console.print(table)

    if result.characters:
        characters = Table(title="Characters")
        characters.add_column("Name", style="cyan")
        characters.add_column("Role")
        characters.add_column("Confidence", justify="right")
        characters.add_column("Mentions", justify="right")
        characters.add_column("New", justify="center")
        for character in result.characters:
            characters.add_row(
                character.name,
                character.role,
                f"{character.confidence:.2f}",
                str(character.appearances),
                "✓" if character.is_new else "",
            )
        console.print(characters)

    if result.synopsis:
        console.print(f"\n[bold]Synopsis:[/bold] {result.synopsis}")


def write_json(result: ExtractionResult, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, 'w') as f:
        json.dump(result.to_dict(), f, indent=2)
    console.print(f"[green]✓ Saved analysis to {output}[/green]")


@click.group()
def cli():
    """StoryVerse - narrative element extraction for story worlds"""
    pass


@cli.command()
@click.option('--file', 'file_path', type=click.Path(exists=True), help='Story file (.txt, .md, .fountain, .pdf)')
@click.option('--text', help='Story text given inline')
@click.option('--title', help='Story title (defaults to the file name)')
@click.option('--profile', type=click.Choice(sorted(PROFILES)), default=config.EXTRACTION_PROFILE, help='Confidence profile')
@click.option('--threshold', type=click.FloatRange(0.0, 1.0), default=config.CONFIDENCE_THRESHOLD, help='Minimum character/location confidence')
@click.option('--output', type=click.Path(), help='Write the result as JSON')
@click.option('--enrich', is_flag=True, help='Ask the LLM for characters and locations the heuristics missed')
@click.option('--demo-overrides', is_flag=True, help='Apply the bundled sample character overrides')
def analyze(file_path, text, title, profile, threshold, output, enrich, demo_overrides):
    """Analyze a story without storing anything."""
    console.print("\n[bold cyan]Story Analysis[/bold cyan]\n")

    if bool(file_path) == bool(text):
        console.print("[red]Error: give exactly one of --file or --text[/red]")
        return

    if file_path:
        try:
            doc = StoryLoader().load(file_path)
        except StoryLoadError as e:
            console.print(f"[red]Error: {e}[/red]")
            return
        text, title = doc.text, title or doc.title

    pipeline = build_pipeline(profile, enrich, demo_overrides)
    options = ExtractionOptions(confidence_threshold=threshold, enrich=enrich)

    try:
        result = analyze_text(text, title or "Untitled", options=options, pipeline=pipeline)
    except ExtractionError as e:
        console.print(f"[red]Error: {e}[/red]")
        return

    print_summary(result)
    if output:
        write_json(result, Path(output))


@cli.command()
@click.option('--name', required=True, help='Story world name')
@click.option('--description', default='', help='Story world description')
def create_world(name, description):
    """Create a story world to import stories into."""
    db = Database()
    world_id = db.create_story_world(name, description)
    console.print(f"[green]✓ Created story world[/green] [cyan]{world_id}[/cyan]")


@cli.command()
@click.option('--file', 'file_path', required=True, type=click.Path(exists=True), help='Story file')
@click.option('--world-id', help='Story world UUID')
@click.option('--title', help='Story title (defaults to the file name)')
@click.option('--profile', type=click.Choice(sorted(PROFILES)), default=config.EXTRACTION_PROFILE, help='Confidence profile')
@click.option('--threshold', type=click.FloatRange(0.0, 1.0), default=config.CONFIDENCE_THRESHOLD, help='Minimum character/location confidence')
@click.option('--enrich', is_flag=True, help='Ask the LLM for characters and locations the heuristics missed')
@click.option('--demo-overrides', is_flag=True, help='Apply the bundled sample character overrides')
def import_story(file_path, world_id, title, profile, threshold, enrich, demo_overrides):
    """Load, analyze and store a story with all extracted entities."""
    console.print("\n[bold cyan]Story Import[/bold cyan]\n")

    db = Database()
    if world_id and not db.get_story_world(world_id):
        console.print(f"[red]Error: story world not found: {world_id}[/red]")
        return

    try:
        doc = StoryLoader().load(file_path)
    except StoryLoadError as e:
        console.print(f"[red]Error: {e}[/red]")
        return
    title = title or doc.title

    pipeline = build_pipeline(profile, enrich, demo_overrides, db=db)
    options = ExtractionOptions(confidence_threshold=threshold, enrich=enrich)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console
    ) as progress:
        task = progress.add_task("Extracting narrative elements...", total=None)
        try:
            result = analyze_text(doc.text, title, story_world_id=world_id, options=options, pipeline=pipeline)
        except ExtractionError as e:
            console.print(f"[red]Error: {e}[/red]")
            return
        progress.update(task, completed=True)

    story_id = db.insert_story(
        title=title,
        story_world_id=world_id,
        source_path=doc.metadata.get('file_path'),
        source_format=doc.source_format,
        word_count=doc.metadata.get('word_count', 0)
    )

    report = PersistenceAdapter(db).persist(result, story_id, story_world_id=world_id)

    print_summary(result)
    console.print(f"\n[green]✓ Import complete![/green]")
    console.print(f"Story ID: [cyan]{story_id}[/cyan]")
    if report.skipped_characters:
        console.print(f"Reused existing characters: {', '.join(report.skipped_characters)}")
    if report.failures:
        console.print(f"[yellow]{len(report.failures)} entities could not be stored (see log)[/yellow]")


@cli.command()
@click.option('--world-id', help='Only stories in this story world')
def status(world_id):
    """Show story worlds and imported stories."""
    db = Database()

    worlds = db.list_story_worlds()
    if worlds:
        table = Table(title="Story Worlds")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Created", style="dim")
        for world in worlds:
            table.add_row(world['id'], world['name'], world['created_at'][:19])
        console.print(table)

    stories = db.list_stories(world_id)
    if not stories:
        console.print("[yellow]No stories imported yet[/yellow]")
        return

    table = Table(title="Imported Stories")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Format")
    table.add_column("Words", justify="right")
    table.add_column("Characters", justify="right")
    table.add_column("Scenes", justify="right")
    for story in stories:
        counts = db.get_story_counts(story['id'])
        table.add_row(
            story['id'],
            story['title'],
            story['detected_format'] or '-',
            str(story['word_count'] or 0),
            str(counts['characters']),
            str(counts['scenes']),
        )
    console.print(table)


@cli.command()
@click.option('--story-id', required=True, help='Story UUID')
@click.option('--output', type=click.Path(), help='Output JSON path (defaults to the analyses directory)')
def export_story(story_id, output):
    """Export a stored story and its entities as JSON."""
    db = Database()
    story = db.get_story(story_id)
    if not story:
        console.print(f"[red]Error: story not found: {story_id}[/red]")
        return

    export = {'story': story}
    for table in ('characters', 'locations', 'items', 'events', 'scenes', 'plotlines',
                  'character_relationships', 'event_dependencies', 'character_arcs'):
        export[table] = db.get_entities(table, story_id)

    output_path = Path(output) if output else config.ANALYSES_DIR / f"{story_id}.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(export, f, indent=2)

    console.print(f"[green]✓ Exported story to {output_path}[/green]")


if __name__ == '__main__':
    cli()
