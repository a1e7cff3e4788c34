"""
ER Diagram Visualization Module - Renders a DiagramProjection using Graphviz or as Mermaid text
"""
import os
import re
from typing import List

import graphviz

from .er_model import DiagramProjection, Entity, Relationship
from .sql_patterns import Cardinality

SUPPORTED_FORMATS = ('png', 'svg', 'pdf')

# (from 端, to 端) 的多重性标记
CARDINALITY_ENDS = {
    Cardinality.ONE_TO_ONE: ('1', '1'),
    Cardinality.MANY_TO_ONE: ('N', '1'),
    Cardinality.MANY_TO_MANY: ('M', 'N'),
}

MERMAID_CONNECTORS = {
    Cardinality.ONE_TO_ONE: '||--||',
    Cardinality.MANY_TO_ONE: '}o--||',
    Cardinality.MANY_TO_MANY: '}o--o{',
}

MERMAID_KEYS = {'PK': 'PK', 'FK': 'FK', 'UQ': 'UK'}


class ERDiagramRenderer:
    """Renders ER diagrams using Graphviz"""

    def __init__(self, name: str = "ER_Diagram", fmt: str = "png"):
        if fmt not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported diagram format: {fmt}")
        self.dot = graphviz.Digraph(name, format=fmt)
        self.dot.attr(rankdir="TB")  # Top to bottom layout
        self.dot.attr("node", fontname="Arial", fontsize="10")
        self.dot.attr("edge", arrowsize="0.7", penwidth="1.2")

    def render_entities(self, entities: List[Entity]):
        """Render entities and their attributes"""
        for entity in entities:
            # Create subgraph for each entity to group it with its attributes
            with self.dot.subgraph(name=f"cluster_{entity.name}") as sub:
                sub.attr(label="", style="invis")  # Invisible cluster

                # Entity node (rectangle)
                sub.node(
                    entity.name,
                    shape="box",
                    style="filled",
                    fillcolor="lightblue",
                    label=entity.display_name
                )

                # Attribute nodes (ellipses)
                for attr in entity.attributes:
                    attr_id = f"{entity.name}__{attr.name}"
                    label = f"{attr.name}\\n{attr.data_type}"

                    if attr.is_pk:
                        sub.node(
                            attr_id,
                            label=f"{label}\\n[PK]",
                            shape="ellipse",
                            style="filled",
                            fillcolor="lightyellow",
                            fontcolor="red",
                            penwidth="2"
                        )
                    else:
                        if attr.key:
                            label = f"{label}\\n[{attr.key}]"
                        sub.node(
                            attr_id,
                            label=label,
                            shape="ellipse",
                            style="filled,dashed" if attr.nullable else "filled",
                            fillcolor="lavender" if attr.is_fk else "white"
                        )

                    # Connect entity to attribute
                    sub.edge(entity.name, attr_id, dir="none")

    def render_relationships(self, relationships: List[Relationship]):
        """Render relationships between entities"""
        for i, rel in enumerate(relationships):
            rel_node = f"rel_{i}"
            from_end, to_end = CARDINALITY_ENDS.get(rel.rel_type, ('?', '?'))
            shorthand = f"{from_end}:{to_end}" if rel.rel_type in CARDINALITY_ENDS else '?'

            # Relationship node (diamond)
            self.dot.node(
                rel_node,
                shape="diamond",
                style="filled",
                fillcolor="lightgreen",
                label=shorthand,
                fontsize="9",
                width="0.8",
                height="0.6"
            )

            # From entity to relationship
            self.dot.edge(rel.from_entity, rel_node, dir="none", label=rel.label, taillabel=from_end)

            # From relationship to target entity
            self.dot.edge(rel_node, rel.to_entity, dir="none", headlabel=to_end)

    def render(self, projection: DiagramProjection) -> 'ERDiagramRenderer':
        self.render_entities(projection.entities)
        self.render_relationships(projection.relationships)
        return self

    @property
    def source(self) -> str:
        """DOT source of the diagram"""
        return self.dot.source

    def pipe(self) -> bytes:
        """Render in memory and return the image bytes"""
        return self.dot.pipe()

    def save(self, filename: str = "er_diagram", view: bool = True, output_dir: str = "output") -> str:
        """Save the diagram to file and return the rendered path"""
        output_path = os.path.join(output_dir, filename)
        return self.dot.render(output_path, view=view, cleanup=True)


def render_er_diagram(projection: DiagramProjection,
                      output_name: str = "er_diagram",
                      view: bool = True,
                      fmt: str = "png",
                      output_dir: str = "output") -> str:
    """
    Convenience function to render an ER diagram

    Args:
        projection: Diagram projection built by build_er_model
        output_name: Output filename (without extension)
        view: Whether to open the diagram after rendering
        fmt: png, svg or pdf
        output_dir: Directory the file is written to

    Returns:
        Path to the generated image file
    """
    renderer = ERDiagramRenderer(output_name, fmt)
    renderer.render(projection)
    return renderer.save(output_name, view, output_dir)


def _mermaid_name(name: str) -> str:
    # Mermaid 实体名只允许字母数字、下划线和连字符
    return re.sub(r'[^A-Za-z0-9_-]', '_', name) or '_'


def _mermaid_type(data_type: str) -> str:
    # DECIMAL(10,2) -> DECIMAL(10_2)
    return re.sub(r'[^A-Za-z0-9_()\[\]-]', '_', data_type)


def render_mermaid(projection: DiagramProjection) -> str:
    """Export the projection as a Mermaid erDiagram definition"""
    lines = ["erDiagram"]

    for entity in projection.entities:
        lines.append(f"    {_mermaid_name(entity.name)} {{")
        for attr in entity.attributes:
            line = f"        {_mermaid_type(attr.data_type)} {_mermaid_name(attr.name)}"
            if attr.key:
                line += f" {MERMAID_KEYS[attr.key]}"
            lines.append(line)
        lines.append("    }")

    for rel in projection.relationships:
        connector = MERMAID_CONNECTORS.get(rel.rel_type, '}o--o{')
        label = rel.label.replace('"', "'")
        lines.append(
            f"    {_mermaid_name(rel.from_entity)} {connector} {_mermaid_name(rel.to_entity)} : \"{label}\""
        )

    return "\n".join(lines) + "\n"
