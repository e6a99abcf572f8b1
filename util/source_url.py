import re
from dataclasses import dataclass

from core.exceptions import ValidationError

SOURCE_URL_PATTERN = re.compile(
    r"^https://(?P<host>[A-Za-z0-9.-]+(?::\d+)?)/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)/?$"
)


@dataclass(frozen=True)
class SourceUrl:
    host: str
    owner: str
    repo: str

    @property
    def display_name(self) -> str:
        return self.repo[:-4] if self.repo.endswith(".git") else self.repo


def parse_source_url(url: str) -> SourceUrl:
    """Split a repository URL of the form https://<host>/<owner>/<repo>[.git][/]."""
    match = SOURCE_URL_PATTERN.match((url or "").strip())
    if not match:
        raise ValidationError(detail="Invalid GitHub URL")

    source = SourceUrl(host=match["host"], owner=match["owner"], repo=match["repo"])
    if not source.display_name:
        raise ValidationError(detail="Invalid GitHub URL")
    return source


def display_name_for(url: str) -> str:
    return parse_source_url(url).display_name
