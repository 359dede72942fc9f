"""
Session Data Retriever — reads the RequirementsSpecifications of the latest
iteration of an engineering model from a COMET web service.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

import requests

from reqif_export.config import get_settings
from reqif_export.exceptions import DataRetrievalError
from reqif_export.models.source import RequirementsSpecification
from reqif_export.services.source_data_assembler import SourceDataAssembler, references

logger = logging.getLogger(__name__)

_DEEP = {"extent": "deep", "includeReferenceData": "true"}


class SessionDataRetriever:
    def __init__(
        self,
        username: str,
        password: str,
        data_source: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.data_source = data_source.rstrip("/")
        self.session = session or requests.Session()
        self.session.auth = (username, password)
        self.session.headers.update({"Accept": "application/json"})
        self.timeout = get_settings().http_timeout_seconds

    def retrieve_requirements_specifications(self, engineering_model_iid: UUID) -> list[RequirementsSpecification]:
        """Fetch and assemble the specifications of the newest non-deleted iteration."""
        site_directory = self._get("SiteDirectory", _DEEP)
        iteration_iid = self._latest_iteration_iid(site_directory, engineering_model_iid)

        logger.info(f"Reading iteration {iteration_iid} of EngineeringModel {engineering_model_iid}")
        iteration_things = self._get(f"EngineeringModel/{engineering_model_iid}/iteration/{iteration_iid}", _DEEP)

        assembler = SourceDataAssembler([*site_directory, *iteration_things])
        return assembler.requirements_specifications(engineering_model_iid, iteration_iid)

    def close(self) -> None:
        self.session.close()

    # ── Internals ────────────────────────────────────────

    def _get(self, resource: str, params: dict[str, str]) -> list[dict[str, Any]]:
        url = f"{self.data_source}/{resource}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise DataRetrievalError(f"GET {url} failed: {exc}") from exc
        except ValueError as exc:
            raise DataRetrievalError(f"GET {url} did not return JSON") from exc

        if not isinstance(data, list):
            raise DataRetrievalError(f"GET {url} returned {type(data).__name__}, expected a list of things")
        logger.debug(f"GET {url} returned {len(data)} things")
        return data

    @staticmethod
    def _latest_iteration_iid(site_directory: list[dict[str, Any]], engineering_model_iid: UUID) -> UUID:
        things = {str(thing["iid"]): thing for thing in site_directory}
        setup = next(
            (
                thing
                for thing in site_directory
                if thing.get("classKind") == "EngineeringModelSetup"
                and str(thing.get("engineeringModelIid")) == str(engineering_model_iid)
            ),
            None,
        )
        if setup is None:
            raise DataRetrievalError(f"EngineeringModel {engineering_model_iid} is not set up on this data source")

        iteration_setups = [
            things[iid]
            for iid in references(setup.get("iterationSetup"))
            if iid in things and not things[iid].get("isDeleted", False)
        ]
        if not iteration_setups:
            raise DataRetrievalError(f"EngineeringModel {engineering_model_iid} has no active iteration")

        latest = max(iteration_setups, key=lambda thing: thing.get("iterationNumber", 0))
        return UUID(str(latest["iterationIid"]))
