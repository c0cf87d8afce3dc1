"""CLI for validating a semantic memory graph file and printing a scene as JSON"""

import argparse
import sys

from loguru import logger

from smgview.config import settings
from smgview.domain.views import parse_view_request
from smgview.session import GraphSession
from smgview.views import build_scene


def main(
    graph_file: str,
    mode: str | None,
    note_id: int | None,
    related_limit: int,
    depth: int,
    min_score: float,
    long_range_top_k: int,
    include_long_range: bool,
) -> int:
    session = GraphSession()
    report = session.open_file(graph_file)

    print(f"{graph_file}: {len(session.store.notes)} notes, {session.summary()}")
    for error in report.errors:
        print(f"  error: {error}")
    for warning in report.warnings:
        print(f"  warning: {warning}")

    if mode:
        view_request = parse_view_request(
            {
                "mode": mode,
                "note_id": note_id if note_id is not None else session.selected_note_id,
                "related_limit": related_limit,
                "depth": depth,
                "min_score_normalized": min_score,
                "long_range_top_k": long_range_top_k,
                "include_long_range": include_long_range,
            }
        )
        scene = build_scene(session.store, view_request)
        print(scene.model_dump_json(by_alias=True, indent=2))

    return 1 if report.errors else 0


if __name__ == "__main__":
    logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

    parser = argparse.ArgumentParser()
    parser.add_argument("--graph", type=str, required=True, help="Graph JSON file")
    parser.add_argument(
        "--mode",
        type=str,
        choices=["neighborhood", "cluster_map", "long_range", "cluster_matrix"],
        required=False,
        help="Build and print a scene for this view mode",
    )
    parser.add_argument(
        "--note-id", type=int, required=False, help="Selected note (defaults to the first note)"
    )
    parser.add_argument(
        "--related-limit", type=int, default=settings.default_related_limit
    )
    parser.add_argument("--depth", type=int, default=settings.default_depth)
    parser.add_argument(
        "--min-score", type=float, default=0.0, help="Normalized threshold in [0, 1]"
    )
    parser.add_argument(
        "--long-range-top-k", type=int, default=settings.default_long_range_top_k
    )
    parser.add_argument(
        "--no-long-range", action="store_true", help="Leave long-range links out of the scene"
    )

    args = parser.parse_args()

    sys.exit(
        main(
            graph_file=args.graph,
            mode=args.mode,
            note_id=args.note_id,
            related_limit=args.related_limit,
            depth=args.depth,
            min_score=args.min_score,
            long_range_top_k=args.long_range_top_k,
            include_long_range=not args.no_long_range,
        )
    )
