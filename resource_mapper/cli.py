"""
Command line entry point.

Usage:
    resource-mapper questionnaire.json response.json [--output patient.json]
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from resource_mapper.core.config import extraction_config, load_extraction_config
from resource_mapper.core.exceptions import ResourceMapperError
from resource_mapper.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from resource_mapper.core.questionnaire_loader import (
    load_questionnaire,
    load_questionnaire_response,
)
from resource_mapper.services.resource_mapper import ResourceMapper

log = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resource-mapper",
        description="Extract a FHIR resource from a QuestionnaireResponse "
        "using the definitions of its Questionnaire",
    )
    parser.add_argument("questionnaire", type=Path, help="Questionnaire (JSON or YAML)")
    parser.add_argument(
        "response", type=Path, help="QuestionnaireResponse (JSON or YAML)"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write the extracted resource here instead of stdout",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="extraction_config.yaml to use (default: config/extraction_config.yaml)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when questionnaire and response item counts differ",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    bind_context(questionnaire=str(args.questionnaire), response=str(args.response))
    try:
        config = load_extraction_config(args.config) if args.config else extraction_config
        if args.strict:
            config = config.model_copy(update={"strict_sibling_matching": True})

        questionnaire = load_questionnaire(args.questionnaire)
        response = load_questionnaire_response(args.response)
        resource = ResourceMapper(config=config).extract(questionnaire, response)
    except (ResourceMapperError, FileNotFoundError) as e:
        log.error("extraction_failed", error=str(e), error_type=type(e).__name__)
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        clear_context()

    output = json.dumps(resource.to_fhir_dict(), indent=2)
    if args.output:
        args.output.write_text(output + "\n")
        print(f"Wrote {args.output}", file=sys.stderr)
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
