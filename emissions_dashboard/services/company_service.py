"""Adds companies to the dashboard ahead of their first re-run."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from emissions_dashboard.errors import Conflict, PersistenceError
from emissions_dashboard.repositories.emission_repo import EmissionRepository
from emissions_dashboard.schemas.requests import AddCompanyRequest, parse_payload
from emissions_dashboard.schemas.responses import MessageResponse
from emissions_dashboard.services.rerun_service import authorize

logger = logging.getLogger(__name__)


class CompanyService:
    def __init__(self, db: Session, emission_repo: EmissionRepository, secret_key: str):
        self.db = db
        self.emissions = emission_repo
        self.secret_key = secret_key

    def add_company(self, payload: Any) -> MessageResponse:
        """Insert an "Init" placeholder row for a new company/year.

        Raises ``Conflict`` when the company/year already has data, including
        when a concurrent request created it first.
        """
        authorize(payload, self.secret_key)
        request = parse_payload(AddCompanyRequest, payload)
        conflict = Conflict(f"{request.company_name} {request.year} already exists.")

        try:
            placeholder = self.emissions.add_placeholder_if_missing(
                request.company_name, request.year
            )
            if placeholder is None:
                raise conflict
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("Lost insert race for %s %d", request.company_name, request.year)
            raise conflict from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Could not add %s %d", request.company_name, request.year)
            raise PersistenceError(f"Could not add company: {exc}") from exc

        logger.info("Added %s %d", request.company_name, request.year)
        return MessageResponse(
            message=f"Successfully added {request.company_name} for {request.year}."
        )
