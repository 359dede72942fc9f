"""
ReqIF Export — Main Entry Point

Convert the requirements of an engineering model on a COMET data source into
a ReqIF document shaped by a template:
    python -m reqif_export convert -u admin -p pass -d https://cdp4services.example.com \
        -m 9ec982e4-ef72-4953-aa85-b158a95d8d56 -s template.reqif -t output.reqif

Or import and run programmatically:
    from reqif_export.main import convert
    convert(username, password, data_source, engineering_model_iid, "template.reqif", "out.reqif")
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence
from uuid import UUID

from reqif_export.config import get_settings
from reqif_export.services.export_settings_reader import ExportSettingsReader
from reqif_export.services.reqif_writer import ReqIFWriter
from reqif_export.services.session_data_retriever import SessionDataRetriever
from reqif_export.services.template_based_builder import TemplateBasedReqIFBuilder
from reqif_export.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def convert(
    username: str,
    password: str,
    data_source: str,
    engineering_model_iid: UUID,
    source_reqif: str | Path,
    target_reqif: str | Path,
    export_settings_path: str | Path,
    exclude_alternative_id: bool = False,
) -> tuple[Path, Path]:
    """Run retrieve → read settings → build → write. Returns the written paths."""
    logger.info("=" * 60)
    logger.info(f"  {get_settings().app_name.upper()}")
    logger.info(f"  Data source: {data_source} | Started: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 60)

    t0 = time.perf_counter()
    retriever = SessionDataRetriever(username, password, data_source)
    try:
        specifications = retriever.retrieve_requirements_specifications(engineering_model_iid)
    finally:
        retriever.close()
    logger.info(f"Retrieved {len(specifications)} RequirementsSpecification(s) in {_elapsed_ms(t0):.0f} [ms]")

    t0 = time.perf_counter()
    export_settings = ExportSettingsReader().read_file(export_settings_path)
    logger.info(f"Export settings read in {_elapsed_ms(t0):.0f} [ms]")

    t0 = time.perf_counter()
    reqif = TemplateBasedReqIFBuilder().build(
        source_reqif,
        specifications,
        export_settings=export_settings,
        exclude_alternative_id=exclude_alternative_id,
    )
    logger.info(f"ReqIF built in {_elapsed_ms(t0):.0f} [ms]")

    t0 = time.perf_counter()
    paths = ReqIFWriter().write(reqif, target_reqif)
    logger.info(f"ReqIF written in {_elapsed_ms(t0):.0f} [ms]")
    return paths


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="reqif-export",
        description="Export ECSS-E-TM-10-25 requirements to ReqIF",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    convert_parser = commands.add_parser("convert", help="Convert the requirements of an engineering model")
    convert_parser.add_argument("-u", "--username", required=True, help="The username used to authenticate")
    convert_parser.add_argument("-p", "--password", required=True, help="The password used to authenticate")
    convert_parser.add_argument("-d", "--datasource", required=True, help="The URI of the COMET data source")
    convert_parser.add_argument("-s", "--source-reqif", required=True, help="The template ReqIF file")
    convert_parser.add_argument("-t", "--target-reqif", required=True, help="The ReqIF file to create")
    convert_parser.add_argument(
        "-e",
        "--export-settings",
        default=settings.default_export_settings,
        help="The export settings JSON file",
    )
    convert_parser.add_argument(
        "-m", "--engineering-model-iid", required=True, type=UUID, help="The iid of the EngineeringModel"
    )
    convert_parser.add_argument(
        "-x",
        "--exclude-alternative-id",
        action="store_true",
        help="Do not set the ALTERNATIVE-ID of exported elements",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(get_settings().log_level)

    try:
        convert(
            username=args.username,
            password=args.password,
            data_source=args.datasource,
            engineering_model_iid=args.engineering_model_iid,
            source_reqif=args.source_reqif,
            target_reqif=args.target_reqif,
            export_settings_path=args.export_settings,
            exclude_alternative_id=args.exclude_alternative_id,
        )
    except Exception:
        logger.exception("The conversion failed")
        return 1

    return 0


def _elapsed_ms(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000


if __name__ == "__main__":
    sys.exit(main())
