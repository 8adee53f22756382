"""
Builds a small archive holding a model and a simulation of it, saves it,
then loads it back and prints what is inside.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console

from omex import CombineArchive, OmexDescription, VCard, load
from omex.render import render_descriptions

MODEL = """<?xml version="1.0" encoding="UTF-8"?>
<sbml xmlns="http://www.sbml.org/sbml/level3/version1/core" level="3" version="1">
  <model id="decay"/>
</sbml>
"""

SIMULATION = """<?xml version="1.0" encoding="UTF-8"?>
<sedML xmlns="http://sed-ml.org/sed-ml/level1/version3" level="1" version="3">
  <listOfModels>
    <model id="decay" language="urn:sedml:language:sbml" source="model.xml"/>
  </listOfModels>
</sedML>
"""

directory = Path(sys.argv[1] if len(sys.argv) > 1 else ".")
directory.mkdir(parents=True, exist_ok=True)

(directory / "model.xml").write_text(MODEL)
(directory / "sim.xml").write_text(SIMULATION)

console = Console()

with CombineArchive() as archive:
    archive.add_entry(
        directory / "model.xml",
        "sbml",
        OmexDescription(
            description="Exponential decay of a single species",
            creators=[VCard(given_name="Jane", family_name="Doe")],
            created=datetime.now(timezone.utc),
        ),
    )
    archive.add_entry(directory / "sim.xml", "sedml")
    archive.save(directory / "decay.omex")

with load(directory / "decay.omex") as loaded:
    console.print(loaded)
    console.print(render_descriptions(loaded))
    console.print(f"Main file: {loaded.main_file}")
