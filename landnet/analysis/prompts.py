"""Network analysis prompt for the generation service."""

from __future__ import annotations

from landnet.models.schemas import ProjectRecord

NETWORK_ANALYSIS_SYSTEM_PROMPT = """\
You are the network analysis engine of the PROCASUR Land Projects Observatory.
Your task is to analyse a complete portfolio of IFAD projects and produce a
network graph that maps:

1. The INTENSITY of the land/property component of each project (score 1-10)
2. The CONNECTIONS between projects across several dimensions
3. Natural CLUSTERS of projects with cooperation potential
4. LEARNING ROUTE potential between clusters

## Land/property intensity taxonomy (landIntensityScore 1-10)

- 8-10 (HIGH): land is the CENTRAL OBJECT of the project. Agrarian reform, mass
  titling, cadastral registration, communal land governance, land conflict
  resolution, land use planning as a main component.
- 4-7 (MEDIUM): land is an INSTRUMENTAL COMPONENT. Access to land as a means to
  another end (food security, poverty reduction), or rights over natural
  resources tied to land.
- 1-3 (LOW): land is CONTEXTUAL. The project operates where land matters but
  does not address it directly (rural microfinance, value chains without a land
  access component).

## Connection types

- "thematic": same kind of land governance intervention
- "geographic": geographic proximity or shared regional context
- "methodological": similar or complementary methodologies
- "temporal": a time window that allows learning (one project further along)
- "institutional": shared donors, implementing agencies or partners

## Output contract

Return ONLY valid JSON (no backticks, no text outside the JSON), exactly in
this shape:

{"nodes":[{"id":"1","label":"ACRONYM","country":"Country","landIntensityScore":8,\
"landClassification":"High","justification":"max 12 words","status":"Active","sector":"sector"}],\
"edges":[{"source":"1","target":"2","strength":7,"type":"thematic","description":"max 10 words"}],\
"clusters":[{"name":"Cluster Name","projects":["1","2"],"description":"max 20 words",\
"learningRoutePotential":"HIGH","proposedRoute":"Country1 -> Country2"}],\
"crossCuttingFindings":["Finding 1","Finding 2","Finding 3"]}

## Rules to keep the JSON compact

- Include EVERY project as a node, using the project id in brackets as node id.
- AT MOST {max_edges} edges in total. Only connections with strength >= 7.
- Node justifications: at most 12 words. Edge descriptions: at most 10 words.
- Cluster descriptions: at most 20 words. AT MOST {max_clusters} clusters.
- crossCuttingFindings: exactly 3 short findings.
- learningRoutePotential: "HIGH", "MEDIUM" or "LOW".
- LANGUAGE: write every text (justifications, descriptions, findings, cluster
  names) in the language given in the user message.
"""

NETWORK_ANALYSIS_USER_PROMPT = """\
COMPLETE PORTFOLIO OF IFAD PROJECTS:

{portfolio}

Generate the complete network analysis as JSON. IMPORTANT: keep descriptions \
short so the JSON stays compact. LANGUAGE OF ALL TEXTS: {language}."""

MAX_EDGES = 40
MAX_CLUSTERS = 6


def language_label(lang: str) -> str:
    return "English" if lang == "en" else "Español"


def summarize_project(project: ProjectRecord) -> str:
    """One pipe-separated line per project, id first so the model reuses it."""
    period = f"{project.anio_inicio or ''}-{project.anio_cierre or ''}"
    return (
        f"[{project.id}] {project.proyecto} | {project.pais} | {project.status} | {period} | "
        f"Land: {project.land_component} | Sector: {project.sector} | "
        f"{project.land_description} | {project.resumen}"
    )


def build_network_messages(projects: list[ProjectRecord], lang: str) -> tuple[str, str]:
    """Return the (system, user) prompt pair for a portfolio snapshot."""
    system = NETWORK_ANALYSIS_SYSTEM_PROMPT.replace("{max_edges}", str(MAX_EDGES)).replace(
        "{max_clusters}", str(MAX_CLUSTERS)
    )
    user = NETWORK_ANALYSIS_USER_PROMPT.format(
        portfolio="\n".join(summarize_project(p) for p in projects),
        language=language_label(lang),
    )
    return system, user
