"""Shared test fixtures for cymage tests."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from cymage.config import CymageConfig, GenerationConfig, KohaConfig

INTRANET_MODULES = "koha-tmpl/intranet-tmpl/prog/en/modules"
OPAC_MODULES = "koha-tmpl/opac-tmpl/bootstrap/en/modules"

MEMBER_FLAGS_TT = """\
[% USE raw %]
[% INCLUDE 'doc-head-open.inc' %]
<title>Set permissions</title>
[% INCLUDE 'doc-head-close.inc' %]
</head>
<body>
[% INCLUDE 'header.inc' %]
<main>
<form method="post" action="/cgi-bin/koha/members/member-flags.pl">
<ul>
[% FOREACH loo IN loop %]
<li>[% loo.flagdesc | html %]</li>
[% END %]
</ul>
</form>
</main>
[% INCLUDE 'intranet-bottom.inc' %]
"""


class FakeGenerator:
    """Stands in for the generation backend; returns canned responses in order."""

    def __init__(self, responses: list[str]) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.responses.pop(0)


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def koha_tree(tmp_path: Path) -> Path:
    """Create a minimal Koha checkout with a few scripts and templates.

    Layout:
        members/moremember.pl
        koha-tmpl/intranet-tmpl/prog/en/modules/members/memberentry.pl
        koha-tmpl/intranet-tmpl/prog/en/modules/members/member-flags.tt
        koha-tmpl/opac-tmpl/bootstrap/en/modules/opac-user.tt
    """
    root = tmp_path / "Koha"
    (root / "members").mkdir(parents=True)
    (root / "members" / "moremember.pl").write_text("#!/usr/bin/perl\nuse Modern::Perl;\n")

    intranet_members = root / INTRANET_MODULES / "members"
    intranet_members.mkdir(parents=True)
    (intranet_members / "memberentry.pl").write_text('<input id="surname" name="surname">\n')
    (intranet_members / "member-flags.tt").write_text(MEMBER_FLAGS_TT)

    opac = root / OPAC_MODULES
    opac.mkdir(parents=True)
    (opac / "opac-user.tt").write_text('<div id="opac-user">\n</div>\n')
    return root


@pytest.fixture
def config(koha_tree: Path) -> CymageConfig:
    """Configuration pointing at the temporary Koha checkout."""
    return CymageConfig(
        koha=KohaConfig(path=koha_tree),
        generation=GenerationConfig(max_files_per_batch=1),
    )


@pytest.fixture
def sample_plan() -> str:
    """Six-step plan naming two source files."""
    return """Test plan:
1. Go to a patron, open members/member-flags.tt
2. Select the catalogue permission
3. Click Save
4. Open the log viewer, see memberentry.pl
5. Find the #logst table
6. Verify the info column has value {catalogue: 1}
"""


@pytest.fixture
def fake_generator() -> type[FakeGenerator]:
    """Factory for canned-response generators."""
    return FakeGenerator
