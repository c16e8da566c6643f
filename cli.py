#!/usr/bin/env python3
"""
Command-line interface for the website generation pipeline.
"""

import argparse
import sys
import webbrowser
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from website_gen.config import Settings
from website_gen.io.exporter import SegmentExporter
from website_gen.models import SegmentType
from website_gen.pipeline.generation import WebsiteGenerator
from website_gen.pipeline.prompt import build_prompt
from website_gen.rendering.preview import PreviewComposer, PreviewSlot
from website_gen.session import GenerationSession
from website_gen.utils.llm_logger import get_logger

# Load environment variables
load_dotenv()


def _open_preview(handle):
    """Open a preview in the browser, then wait so the file outlives the page load."""
    print(f"🌐 Opening preview: {handle.uri}")
    webbrowser.open(handle.uri)
    input("Press Enter to close the preview...")


def cmd_generate(args):
    """Generate a website from a description."""
    print("🚀 Generating website...")

    settings = Settings.from_env(
        provider=args.provider,
        model_name=args.model,
        temperature=args.temperature,
    )
    print(f"🤖 Using {settings.provider}/{settings.model_name}")

    with PreviewSlot() as slot:
        session = GenerationSession(WebsiteGenerator(settings), preview_slot=slot)
        outcome = session.run(args.description)

        if not outcome.ok:
            print(f"❌ {outcome.message}")
            return 1

        bundle = outcome.bundle
        print("✅ Website generated successfully!")
        for segment in SegmentType:
            print(f"   {segment.value.upper():<4} {len(bundle.segment(segment)):>6} chars")

        if not args.no_export:
            run_id = bundle.generation_metadata.get("run_id") or "latest"
            exporter = SegmentExporter(Path(args.output or settings.output_dir) / run_id)
            paths = exporter.export_bundle(bundle)
            exporter.save_metadata(bundle)
            preview_path = exporter.output_dir / "preview.html"
            preview_path.write_text(outcome.preview.html, encoding="utf-8")

            print(f"💾 Saved to: {exporter.output_dir}")
            for segment, path in paths.items():
                print(f"   📄 {segment.value}: {path}")
            print(f"   🖥️  preview: {preview_path}")

        if args.open:
            _open_preview(session.preview_handle)

    return 0


def cmd_preview(args):
    """Compose a preview from previously exported files."""
    print("🖥️  Composing preview...")

    source_dir = Path(args.dir)
    if not source_dir.exists():
        print(f"❌ Error: Directory not found: {source_dir}")
        return 1

    exporter = SegmentExporter(source_dir)
    try:
        bundle = exporter.load_bundle()
    except (FileNotFoundError, ValidationError) as e:
        print(f"❌ Error: {e}")
        return 1

    document = PreviewComposer().compose(bundle)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(document.html, encoding="utf-8")
        print(f"✅ Preview saved: {output_path}")

    if args.open or not args.output:
        with PreviewSlot() as slot:
            _open_preview(slot.replace(document))

    return 0


def cmd_prompt(args):
    """Print the prompt that would be sent for a description."""
    description = args.description.strip()
    if not description:
        print("❌ Please describe the website you want to generate.")
        return 1

    print(build_prompt(description))
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Website Generation from Natural-Language Descriptions",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--log-level",
        choices=["NONE", "INFO", "DEBUG", "TRACE"],
        help="LLM debug log level (default: LLM_DEBUG_LEVEL or NONE)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate a website from a description")
    gen_parser.add_argument("description", help="What the website should be")
    gen_parser.add_argument("--output", "-o", help="Output directory (default: OUTPUT_DIR or outputs)")
    gen_parser.add_argument("--provider", "-p", choices=["groq", "openai", "anthropic"],
                            help="LLM provider (default: LLM_PROVIDER or groq)")
    gen_parser.add_argument("--model", help="Model name (default: provider default)")
    gen_parser.add_argument("--temperature", type=float, help="Sampling temperature (default: 0.4)")
    gen_parser.add_argument("--no-export", action="store_true", help="Do not write files")
    gen_parser.add_argument("--open", action="store_true", help="Open the preview in a browser")

    # Preview command
    preview_parser = subparsers.add_parser("preview", help="Preview exported files")
    preview_parser.add_argument("--dir", "-d", required=True,
                                help="Directory with index.html, style.css and script.js")
    preview_parser.add_argument("--output", "-o", help="Write the composed document here")
    preview_parser.add_argument("--open", action="store_true", help="Open the preview in a browser")

    # Prompt command
    prompt_parser = subparsers.add_parser("prompt", help="Show the prompt for a description")
    prompt_parser.add_argument("description", help="What the website should be")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.log_level:
        logger = get_logger()
        logger.configure(level=args.log_level, log_to_file=logger.log_to_file, log_dir=logger.log_dir)

    try:
        if args.command == "generate":
            return cmd_generate(args)
        elif args.command == "preview":
            return cmd_preview(args)
        elif args.command == "prompt":
            return cmd_prompt(args)
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ Error: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
