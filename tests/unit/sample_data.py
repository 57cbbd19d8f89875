"""Sample projects and trees shared by the tests."""

from datetime import UTC, datetime

from report_outliner.models.section import SectionNode, Sections

T0 = datetime(2024, 1, 1, tzinfo=UTC)
T1 = datetime(2024, 6, 1, tzinfo=UTC)

PROJECT_CONTEXT = (
    "A web application that tracks shared expenses between flatmates, "
    "built with FastAPI and PostgreSQL."
)


def build_sample_sections() -> Sections:
    """Three root sections, nested up to three levels.

    1 Introduction          (intro)
      1.1 Background        (bg)
      1.2 Diagram: Architecture (arch)
    2 Methods               (methods)
      2.1 Data              (data)
        2.1.1 Table: Dataset statistics (stats)
    3 Conclusion            (concl)
    """

    def node(id_: str, name: str, *children: SectionNode) -> SectionNode:
        return SectionNode(id=id_, name=name, prompt=f"prompt {id_}", updated_at=T0, children=children)

    return (
        node(
            "intro",
            "Introduction",
            node("bg", "Background"),
            node("arch", "Diagram: Architecture"),
        ),
        node("methods", "Methods", node("data", "Data", node("stats", "Table: Dataset statistics"))),
        node("concl", "Conclusion"),
    )
