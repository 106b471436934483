"""ContentOps - fact-check and rewrite blog posts

Simple CLI for serving the API or analyzing a local file.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

from app.agents.orchestrator import ContentAnalysisPipeline
from app.config import settings
from app.models.errors import AnalysisError
from app.models.pipeline import AnalysisRequest, Credentials


async def run_analysis(args: argparse.Namespace) -> int:
    """Run the pipeline once on a local HTML file."""
    content = Path(args.file).read_text(encoding="utf-8")
    request = AnalysisRequest(
        content=content,
        title=args.title or Path(args.file).stem,
        credentials=Credentials(
            search_key=args.brave_key or os.getenv("BRAVE_API_KEY", ""),
            llm_key=args.anthropic_key or os.getenv("ANTHROPIC_API_KEY", ""),
        ),
        research_instructions=args.research_prompt,
        writing_instructions=args.writing_prompt,
    )
    print(f"Analyzing: {request.title} ({len(content)} chars)")
    print("-" * 50)

    try:
        result = await ContentAnalysisPipeline().run(request)
    except AnalysisError as e:
        print(f"\n[!] Error after {e.duration_ms}ms: {e.message}", file=sys.stderr)
        return 1

    print(f"\n[*] Analysis complete in {result.duration_ms / 1000:.1f}s")
    print(f"   Searches: {result.searches_used}")
    print(f"   Rewrite calls: {result.llm_calls}")
    print("\nChanges:")
    for change in result.change_summary:
        print(f"  - {change}")

    if args.output:
        Path(args.output).write_text(result.rewritten_content, encoding="utf-8")
        print(f"\nRewritten content written to {args.output}")
    else:
        print(f"\n{'=' * 50}")
        print(result.rewritten_content)
    return 0


def serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("app.main:app", host=args.host, port=args.port or settings.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ContentOps fact-check and rewrite")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, help="Port (default: from config)")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a local HTML file")
    analyze_parser.add_argument("--file", "-f", required=True, help="Path to blog HTML")
    analyze_parser.add_argument("--title", "-t", help="Post title (default: file name)")
    analyze_parser.add_argument("--output", "-o", help="Write rewritten content here")
    analyze_parser.add_argument("--anthropic-key", help="Default: $ANTHROPIC_API_KEY")
    analyze_parser.add_argument("--brave-key", help="Default: $BRAVE_API_KEY")
    analyze_parser.add_argument("--research-prompt")
    analyze_parser.add_argument("--writing-prompt")
    return parser


def main():
    args = build_parser().parse_args()

    if args.command == "serve":
        sys.exit(serve(args))
    sys.exit(asyncio.run(run_analysis(args)))


if __name__ == "__main__":
    main()
