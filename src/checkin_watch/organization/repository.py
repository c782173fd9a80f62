from __future__ import annotations

from typing import Protocol, Sequence

from .model import Company, Team, Worker


class OrganizationRepository(Protocol):
    def list_active_companies(self) -> Sequence[Company]:
        raise NotImplementedError

    def list_active_teams(self, *, company_id: int) -> Sequence[Team]:
        """Active teams of one tenant, each with its current leader (if any)."""

        raise NotImplementedError

    def list_active_workers(self, *, company_id: int, team_ids: Sequence[int]) -> Sequence[Worker]:
        """Active WORKER persons on the given teams that have a team assignment timestamp."""

        raise NotImplementedError
