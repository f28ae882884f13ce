# main.py
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rpglump.errors import LumpNotFoundError
from rpglump.project import DOMAINS, Project
from rpglump.records import records_to_dicts
from rpglump.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def summarize_project(project: Project, domains: List[str]) -> Dict[str, Any]:
    """Decode ``domains`` and build a JSON-ready summary."""
    summary: Dict[str, Any] = {
        'source': str(project.store.source),
        'project_name': project.project_name,
        'container_format': project.store.container_format.name.lower(),
        'lump_count': len(project.store),
        'container_errors': list(project.store.errors),
    }
    for domain in domains:
        result = project.load_domain(domain)
        if domain == "general":
            summary[domain] = result.to_dict() if result else None
        else:
            summary[domain] = records_to_dicts(result)
    summary['tilesets'] = project.available_tileset_ids()
    summary['errors'] = dict(project.errors)
    summary['missing'] = list(project.missing)
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Decode an RPG project and write a JSON summary'
    )
    parser.add_argument('path',
                        help='Project directory or .rpg file')
    parser.add_argument('--output', '-o',
                        help='Output JSON file (default: stdout)')
    parser.add_argument('--domain',
                        action='append',
                        choices=DOMAINS,
                        help='Domain to decode; repeat for several (default: all)')
    parser.add_argument('--log-dir',
                        help='Directory for log files (default: console only)')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Enable verbose logging')

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(args.log_dir, log_level)

    try:
        project = Project.from_path(args.path)
    except LumpNotFoundError as e:
        logger.error(f"Cannot open project: {e}")
        return 1

    summary = summarize_project(project, args.domain or list(DOMAINS))
    text = json.dumps(summary, indent=2)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding='utf-8')
        logger.info(f"Results written to {output_path}")
    else:
        print(text)

    return 0


if __name__ == "__main__":
    sys.exit(main())
