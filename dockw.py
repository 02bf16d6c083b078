#!/usr/bin/env python3
"""
Documentation Keyword Tools CLI

Command-line interface for validating, searching, indexing and analyzing
keyword annotations in markdown documentation.
By default, works on the project containing the current directory.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

from doc_keywords import ConfigError, ConfigResolver, ProjectContextBuilder, SearchEngine, SuggestionEngine
from doc_keywords.aggregate import (
    build_graph,
    build_index,
    collect_documents,
    collection_stats,
    keyword_frequencies,
    render_dot,
    top_keywords,
)
from doc_keywords.context import ProjectContext
from doc_keywords.search import SEARCH_KINDS
from doc_keywords.validator import validate_context


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


class CLI:
    """Command-line interface for dockw."""

    def __init__(self, global_config_path: Optional[Union[str, Path]] = None):
        """Initialize CLI.

        Args:
            global_config_path: Global config file (default: ~/.doc/config.toml)
        """
        self.global_config_path = global_config_path

    def _resolver(self, args) -> ConfigResolver:
        """Build a config resolver with --doc-path/--taxonomy as runtime overrides."""
        overrides: Dict[str, str] = {}
        if args.doc_path:
            overrides["path"] = args.doc_path
        if args.taxonomy:
            overrides["taxonomy"] = args.taxonomy
        return ConfigResolver(global_config_path=self.global_config_path, overrides=overrides)

    def _contexts(self, args, default_root: Optional[Path] = None) -> List[ProjectContext]:
        """Build one context per project root given on the command line."""
        builder = ProjectContextBuilder(self._resolver(args))
        roots = args.projects or [default_root]
        return [builder.build(root) for root in roots]

    @staticmethod
    def _write_output(text: str, output: Optional[str]) -> None:
        if output:
            with open(output, "w", encoding="utf-8") as f:
                f.write(text)
            print(f"Wrote {output}", file=sys.stderr)
        else:
            sys.stdout.write(text)

    # ==================== Validation ====================

    def cmd_validate(self, args):
        """Validate document keywords against the taxonomy."""
        reports = [validate_context(ctx) for ctx in self._contexts(args)]

        if args.format == "json":
            print(json.dumps(
                [
                    {
                        "project": r.project_root,
                        "taxonomy": r.taxonomy_path,
                        "taxonomy_loaded": r.taxonomy_loaded,
                        "documents": len(r.documents),
                        "invalid": {
                            d.path: sorted(d.result.invalid) for d in r.invalid_documents
                        },
                        "untagged": r.untagged,
                        "errors": r.errors,
                        "passed": r.passed,
                    }
                    for r in reports
                ],
                indent=2,
            ))
        else:
            for report in reports:
                print(f"Project: {report.project_root}")
                if not report.taxonomy_loaded:
                    print(f"Taxonomy not found: {report.taxonomy_path} (validation disabled)")
                for error in report.errors:
                    print(f"✗ {error}")
                for doc in report.invalid_documents:
                    print(f"✗ {doc.path}")
                    print(f"   Invalid keywords: {', '.join(sorted(doc.result.invalid))}")
                if report.strict:
                    for path in report.untagged:
                        print(f"✗ {path}")
                        print("   No keywords")
                status = "✓ All keywords valid" if report.passed else "✗ Validation failed"
                print(f"{status} ({len(report.documents)} documents checked)\n")

        return 0 if all(r.passed for r in reports) else 1

    # ==================== Search ====================

    def cmd_search(self, args):
        """Search documents by keyword, content or cross-reference."""
        search = SearchEngine(self._contexts(args))

        for ctx in search.disabled_contexts(args.type):
            print(
                f"Warning: {args.type} references are disabled in {ctx.project_root}",
                file=sys.stderr,
            )

        results = search.search(args.type, args.query)

        if args.format == "json":
            print(json.dumps(search.format_search_results(args.type, args.query, results), indent=2))
        else:
            if not results:
                print(f"No documents found for {args.type}: {args.query}")
            else:
                print(f"Documents matching {args.type} '{args.query}':")
                for path in results:
                    print(f"  {path}")

        return 0

    # ==================== Index & Graph ====================

    def cmd_index(self, args):
        """Build keyword index."""
        index = build_index(collect_documents(self._contexts(args)))
        self._write_output(json.dumps(index, indent=2, sort_keys=True) + "\n", args.output)
        return 0

    def cmd_graph(self, args):
        """Build keyword co-occurrence graph."""
        graph = build_graph(collect_documents(self._contexts(args)), min_weight=args.min_weight)
        self._write_output(render_dot(graph, weights=args.weights), args.output)
        return 0

    # ==================== Suggestions ====================

    def cmd_suggest(self, args):
        """Suggest keywords for a document."""
        filepath = Path(args.file)
        if not filepath.is_file():
            print(f"File not found: {args.file}", file=sys.stderr)
            return 1

        project_root = self._resolver(args).find_project_root(filepath.resolve().parent)
        taxonomy = self._contexts(args, default_root=project_root)[0].taxonomy
        if args.taxonomy_only and taxonomy is None:
            print("Warning: No taxonomy loaded; --taxonomy-only yields no suggestions", file=sys.stderr)

        engine = SuggestionEngine()
        suggestions = engine.suggest_for_file(
            filepath,
            taxonomy=taxonomy,
            taxonomy_only=args.taxonomy_only,
            limit=args.limit,
        )

        if args.format == "json":
            print(json.dumps(
                engine.format_suggestions(str(filepath), suggestions, confidence=args.confidence),
                indent=2,
            ))
        else:
            if not suggestions:
                print(f"No suggestions for {args.file}")
            else:
                print(f"Suggested keywords for {args.file}:")
                for s in suggestions:
                    marker = " (taxonomy)" if s.in_taxonomy else ""
                    score = f"  {s.confidence:.2f}" if args.confidence else ""
                    print(f"  :{s.keyword}{score}{marker}")
                print(f"\nAnnotation: {engine.format_suggestions(str(filepath), suggestions)['annotation']}")

        return 0

    # ==================== Statistics ====================

    def cmd_stats(self, args):
        """Show keyword statistics."""
        documents = collect_documents(self._contexts(args))
        stats = collection_stats(documents)
        ranked = top_keywords(keyword_frequencies(documents), args.top)

        if args.format == "json":
            stats["keywords"] = [{"keyword": kw, "documents": count} for kw, count in ranked]
            print(json.dumps(stats, indent=2))
        else:
            print("Documentation statistics:")
            print(f"  Documents: {stats['documents']}")
            print(f"  Tagged documents: {stats['tagged_documents']}")
            print(f"  Untagged documents: {stats['untagged_documents']}")
            print(f"  Unique keywords: {stats['unique_keywords']}")
            print(f"  Keyword annotations: {stats['total_annotations']}")
            print(f"  Avg keywords per tagged document: {stats['avg_keywords_per_tagged_document']}")
            print(f"  ADR references: {stats['adr_refs']}")
            print(f"  Requirement references: {stats['req_refs']}")
            print(f"  RunNotes references: {stats['runnote_refs']}")

            if ranked:
                title = f"Top {args.top} keywords" if args.top else "Keywords"
                print(f"\n{title}:")
                print(f"  {'Keyword':<40} {'Documents':>9}")
                print("  " + "-" * 50)
                for kw, count in ranked:
                    print(f"  {kw:<40} {count:>9}")

        return 0

    # ==================== Main ====================

    def build_parser(self) -> argparse.ArgumentParser:
        parser = ArgumentParser(
            prog="dockw",
            description="Documentation Keyword Tools - Validate, search and analyze keyword annotations",
        )
        doc_path_help = "Documentation directory, overrides config 'path'"
        taxonomy_help = "Taxonomy document, overrides config 'taxonomy'"
        parser.add_argument("--doc-path", help=doc_path_help)
        parser.add_argument("--taxonomy", help=taxonomy_help)

        # Accepted after the command too; SUPPRESS keeps a value given before it
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument("--doc-path", default=argparse.SUPPRESS, help=doc_path_help)
        common.add_argument("--taxonomy", default=argparse.SUPPRESS, help=taxonomy_help)

        subparsers = parser.add_subparsers(dest="command", help="Command")

        projects_help = "Project root directories (default: current project)"
        format_help = "Output format: 'json' for structured data, 'table' for human-readable (default: table)"

        p_validate = subparsers.add_parser("validate", help="Validate keywords against taxonomy", parents=[common],
                                           description="Check every document's keywords against the project taxonomy")
        p_validate.add_argument("--format", choices=["json", "table"], default="table", help=format_help)
        p_validate.add_argument("projects", nargs="*", help=projects_help)

        p_search = subparsers.add_parser("search", help="Search documents", parents=[common],
                                         description="Find documents by keyword, content, ADR, requirement or RunNotes reference",
                                         epilog="""
Examples:
  dockw search keyword :api
  dockw search content "rate limit"
  dockw search adr 00042
  dockw search req REQ-AUTH-001
  dockw search runnote RunNotes-2025-01-15-Feature
                                         """,
                                         formatter_class=argparse.RawDescriptionHelpFormatter)
        p_search.add_argument("type", choices=SEARCH_KINDS, help="What to search by")
        p_search.add_argument("query", help="Keyword, text, or reference id")
        p_search.add_argument("--format", choices=["json", "table"], default="table", help=format_help)
        p_search.add_argument("projects", nargs="*", help=projects_help)

        p_index = subparsers.add_parser("index", help="Build keyword index", parents=[common],
                                        description="Map every keyword to the documents containing it (JSON)")
        p_index.add_argument("--output", help="Write index to file instead of stdout")
        p_index.add_argument("projects", nargs="*", help=projects_help)

        p_graph = subparsers.add_parser("graph", help="Build keyword co-occurrence graph", parents=[common],
                                        description="Emit a Graphviz DOT graph of keywords appearing together",
                                        epilog="""
Render with Graphviz:
  dockw graph --weights | dot -Tpng -o keywords.png
                                        """,
                                        formatter_class=argparse.RawDescriptionHelpFormatter)
        p_graph.add_argument("--weights", action="store_true", help="Label edges with co-occurrence counts")
        p_graph.add_argument("--min-weight", type=positive_int, default=1,
                             help="Only include edges shared by at least N documents (default: 1)")
        p_graph.add_argument("--output", help="Write graph to file instead of stdout")
        p_graph.add_argument("projects", nargs="*", help=projects_help)

        p_suggest = subparsers.add_parser("suggest", help="Suggest keywords for a document", parents=[common],
                                          description="Propose keywords a document does not carry yet")
        p_suggest.add_argument("file", help="Markdown document to analyze")
        p_suggest.add_argument("--confidence", action="store_true", help="Show a 0-1 confidence per suggestion")
        p_suggest.add_argument("--taxonomy-only", action="store_true", help="Only suggest taxonomy keywords")
        p_suggest.add_argument("--limit", type=positive_int, default=10,
                               help="Maximum number of suggestions (default: 10)")
        p_suggest.add_argument("--format", choices=["json", "table"], default="table", help=format_help)
        p_suggest.add_argument("projects", nargs="*", help=projects_help)

        p_stats = subparsers.add_parser("stats", help="Keyword statistics", parents=[common],
                                        description="Show document counts and keyword frequencies")
        p_stats.add_argument("--top", type=positive_int, help="Only show the N most used keywords")
        p_stats.add_argument("--format", choices=["json", "table"], default="table", help=format_help)
        p_stats.add_argument("projects", nargs="*", help=projects_help)

        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run CLI."""
        parser = self.build_parser()
        args, extras = parser.parse_known_args(argv)

        # Project roots following an option are left over by argparse
        unknown = [arg for arg in extras if arg.startswith("-")]
        if unknown or (extras and not hasattr(args, "projects")):
            parser.error(f"unrecognized arguments: {' '.join(unknown or extras)}")
        if extras:
            args.projects = list(args.projects or []) + extras

        if not args.command:
            parser.print_help()
            return 1

        command_map = {
            "validate": self.cmd_validate,
            "search": self.cmd_search,
            "index": self.cmd_index,
            "graph": self.cmd_graph,
            "suggest": self.cmd_suggest,
            "stats": self.cmd_stats,
        }

        try:
            return command_map[args.command](args)
        except (ConfigError, ValueError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    cli = CLI()
    sys.exit(cli.run(argv))


def _command_main(command: str):
    def entry():
        main([command, *sys.argv[1:]])
    entry.__doc__ = f"Entry point for doc-{command}."
    return entry


validate_main = _command_main("validate")
search_main = _command_main("search")
index_main = _command_main("index")
graph_main = _command_main("graph")
suggest_main = _command_main("suggest")
stats_main = _command_main("stats")


if __name__ == "__main__":
    main()
