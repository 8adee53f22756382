"""
Shared fixtures: small source files to put in archives, and settings that
keep every staging directory inside the test's temporary directory.
"""

from datetime import datetime, timezone

import pytest

from omex import ArchiveSettings, CombineArchive
from omexmeta import OmexDescription, VCard

MODEL_CONTENTS = "<sbml><model id='test'/></sbml>"
SIMULATION_CONTENTS = "<sedML><listOfSimulations/></sedML>"


@pytest.fixture
def settings(tmp_path):
    yield ArchiveSettings(staging_root=tmp_path / "staging")


@pytest.fixture
def sources(tmp_path):
    directory = tmp_path / "sources"
    directory.mkdir()

    model = directory / "model.xml"
    model.write_text(MODEL_CONTENTS)

    simulation = directory / "sim.xml"
    simulation.write_text(SIMULATION_CONTENTS)

    yield {"model": model, "simulation": simulation}


@pytest.fixture
def description():
    yield OmexDescription(
        description="A model of something interesting",
        creators=[
            VCard(
                given_name="Jane",
                family_name="Doe",
                email="jane@example.com",
                organization="Example University",
            )
        ],
        created=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        modified=[datetime(2024, 2, 3, 4, 5, 6, tzinfo=timezone.utc)],
    )


@pytest.fixture
def archive(settings):
    archive = CombineArchive(settings=settings)

    yield archive

    archive.close()


@pytest.fixture
def populated(archive, sources, description):
    archive.add_entry(sources["model"], "sbml", description)
    archive.add_entry(sources["simulation"], "sedml")

    yield archive
