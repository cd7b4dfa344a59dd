"""
STAAD.Pro input file generator.

Serializes nodes, shell plates, pedestal members and design groups into the
fixed-format STAAD text input.
"""

from datetime import date
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence
from loguru import logger

from staadmesh.core.config import Config, get_default_config
from staadmesh.core.geometry import format_number
from staadmesh.core.models import (
    GroupName,
    Member,
    Node,
    Plate,
    PlateGroups,
    StructuralModel,
)


GROUP_CONTINUATION = " -"


def pack_statements(statements: Iterable[str], line_limit: int) -> List[str]:
    """
    Pack statements into ';'-separated lines.

    A statement joins the current line only if the line, with its trailing
    ';', stays within line_limit characters. Every emitted line ends with ';'.

    Args:
        statements: Statements such as "1 0 0 0"
        line_limit: Maximum line length including the trailing ';'

    Returns:
        Packed lines
    """
    lines = []
    current = ""

    for statement in statements:
        if not current:
            current = statement
        elif len(current + "; " + statement + ";") <= line_limit:
            current += "; " + statement
        else:
            lines.append(current + ";")
            current = statement

    if current:
        lines.append(current + ";")

    return lines


def format_group_lines(group_name: str, plate_ids: Sequence[int], line_limit: int) -> List[str]:
    """
    Format one group definition, wrapping with STAAD's '-' continuation.

    Args:
        group_name: Group name without the leading '_'
        plate_ids: Sorted plate ids
        line_limit: Maximum line length including the continuation marker

    Returns:
        Group lines; empty when there are no plate ids
    """
    if not plate_ids:
        return []

    lines = []
    current = "_" + group_name.upper()
    # Leave room for the continuation marker on wrapped lines
    limit = line_limit - len(GROUP_CONTINUATION)

    for plate_id in plate_ids:
        candidate = current + " " + str(plate_id)
        if len(candidate) > limit:
            lines.append(current + GROUP_CONTINUATION)
            current = str(plate_id)
        else:
            current = candidate

    lines.append(current)

    return lines


class StaadGenerator:
    """
    Generates STAAD SPACE input text.

    Numbers are rounded to 3 decimals. Member ids continue after the last
    plate id, since STAAD numbers plates and members in one sequence.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize STAAD generator.

        Args:
            config: Export settings and material; uses the default config if None
        """
        self.config = config or get_default_config()
        self.line_limit = self.config.get_export_setting("line_limit", 74)
        self.group_line_limit = self.config.get_export_setting("group_line_limit", 60)
        self.input_width = self.config.get_export_setting("input_width", 79)
        self.unit = self.config.get_export_setting("unit", "METER KN")
        self.date_format = self.config.get_export_setting("date_format", "%d-%b-%y")
        self.text: Optional[str] = None

    def generate(
        self,
        nodes: Sequence[Node],
        plates: Sequence[Plate],
        members: Sequence[Member],
        groups: PlateGroups,
        plate_thickness: float,
        export_date: date,
    ) -> str:
        """
        Generate the STAAD input text.

        Args:
            nodes: All nodes, in id order
            plates: All plates, in id order
            members: Pedestal members, in id order
            groups: Classified design groups
            plate_thickness: Plate thickness (m)
            export_date: Date written to the job information

        Returns:
            STAAD input text (lines joined with newlines)
        """
        logger.info(
            f"Generating STAAD input: {len(nodes)} joints, {len(plates)} plates, "
            f"{len(members)} members"
        )

        lines = self._header(export_date)

        lines.append("JOINT COORDINATES")
        lines.extend(
            pack_statements(
                (
                    f"{n.id} {format_number(n.x)} {format_number(n.y)} {format_number(n.z)}"
                    for n in nodes
                ),
                self.line_limit,
            )
        )

        lines.append("ELEMENT INCIDENCES SHELL")
        lines.extend(
            pack_statements(
                (f"{p.id} {' '.join(str(n) for n in p.nodes)}" for p in plates),
                self.line_limit,
            )
        )

        lines.extend(self._group_definition(groups))

        last_plate_id = plates[-1].id if plates else 0
        if plates:
            lines.append("ELEMENT PROPERTY")
            lines.append(f"1 TO {last_plate_id} THICKNESS {format_number(plate_thickness)};")

        if members:
            lines.extend(self._members(members, first_id=last_plate_id + 1))

        lines.append("FINISH")

        self.text = "\n".join(lines)

        logger.success(f"Generated STAAD input: {len(lines)} lines")

        return self.text

    def generate_from_model(self, model: StructuralModel, export_date: date) -> str:
        """Generate STAAD input text for a computed model."""
        return self.generate(
            nodes=model.nodes,
            plates=model.plates,
            members=model.members,
            groups=model.groups,
            plate_thickness=model.snapshot.plate_thickness,
            export_date=export_date,
        )

    def _header(self, export_date: date) -> List[str]:
        """Job information and input settings."""
        return [
            "STAAD SPACE",
            "START JOB INFORMATION",
            "ENGINEER DATE " + export_date.strftime(self.date_format),
            "END JOB INFORMATION",
            f"INPUT WIDTH {self.input_width}",
            f"UNIT {self.unit}",
        ]

    def _group_definition(self, groups: PlateGroups) -> List[str]:
        """Group definition block, empty when every group is empty."""
        if groups.is_empty():
            return []

        lines = ["START GROUP DEFINITION", "ELEMENT"]
        for name in GroupName:
            lines.extend(format_group_lines(name.value, groups.get(name), self.group_line_limit))
        lines.append("END GROUP DEFINITION")

        return lines

    def _members(self, members: Sequence[Member], first_id: int) -> List[str]:
        """Member incidences, material, constants and prismatic properties."""
        staad_ids = {m.id: first_id + i for i, m in enumerate(members)}

        lines = ["MEMBER INCIDENCES"]
        for member in members:
            lines.append(f"{staad_ids[member.id]} {member.start_node} {member.end_node};")

        material = self.config.get_material()
        material_name = material.pop("name", "CONCRETE")

        lines.append("DEFINE MATERIAL START")
        lines.append(f"ISOTROPIC {material_name}")
        for key, value in material.items():
            lines.append(f"{key} {self._format_material_value(value)}")
        lines.append("END DEFINE MATERIAL")

        lines.append("CONSTANTS")
        lines.append(f"MATERIAL {material_name} ALL")

        lines.append("MEMBER PROPERTY")
        for member in members:
            lines.append(
                f"{staad_ids[member.id]} PRISM "
                f"YD {format_number(member.pedestal.length)} "
                f"ZD {format_number(member.pedestal.width)};"
            )

        return lines

    @staticmethod
    def _format_material_value(value: Any) -> str:
        """Material constants use %g, e.g. 21718500.0 -> 2.17185e+07."""
        if isinstance(value, (int, float)):
            return f"{value:g}"
        return str(value)

    def write(self, output_path: str) -> None:
        """
        Write STAAD file to disk.

        Args:
            output_path: Path to output .STD file
        """
        if self.text is None:
            raise RuntimeError("No STAAD text to write. Call generate() first.")

        output_file = Path(output_path)
        output_file.write_text(self.text, encoding="utf-8")

        file_size_kb = output_file.stat().st_size / 1024

        logger.success(
            f"Wrote STAAD file: {output_file.absolute()} ({file_size_kb:.1f} KB)"
        )


def export_staad(
    model: StructuralModel,
    export_date: date,
    output_path: Optional[str] = None,
    config: Optional[Config] = None,
) -> str:
    """
    Convenience function to export a computed model as STAAD input.

    Args:
        model: Computed structural model
        export_date: Date written to the job information
        output_path: Optional path; the text is also written there if given
        config: Optional config with export settings and material

    Returns:
        STAAD input text
    """
    generator = StaadGenerator(config=config)
    text = generator.generate_from_model(model, export_date)

    if output_path:
        generator.write(output_path)

    return text
