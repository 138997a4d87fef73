from typing import Optional

from pydantic import BaseModel


class EnrichmentResult(BaseModel):
    company_name: Optional[str] = None
    research_summary: Optional[str] = None
    linkedin_title: Optional[str] = None
    linkedin_url: Optional[str] = None

    @property
    def has_research(self) -> bool:
        return self.research_summary is not None
