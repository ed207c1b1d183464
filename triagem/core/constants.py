"""Application constants.

Contains table names, query column lists, statistic buckets and the
column mapping used to adapt legacy (spreadsheet / wide) candidate rows.
"""

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------
CANDIDATES_TABLE: str = "candidates"
USERS_TABLE: str = "users"

# ---------------------------------------------------------------------------
# Candidate columns
# Keys inside the ``data`` JSON column are addressed with PostgREST's
# ``->>`` text operator.
# ---------------------------------------------------------------------------
CPF_COLUMN: str = "data->>cpf"
VAGA_PCD_COLUMN: str = "data->>vaga_pcd"
NOME_SOCIAL_COLUMN: str = "data->>nome_social"
CARGO_COLUMNS: tuple[str, ...] = (
    "data->>cargo_administrativo",
    "data->>cargo_assistencial",
)

# Columns matched by the ``search`` filter of the paginated listing
LIST_SEARCH_COLUMNS: tuple[str, ...] = ("name", "registration_number")

# Columns matched by the autocomplete search
SEARCH_COLUMNS: tuple[str, ...] = (
    "name",
    NOME_SOCIAL_COLUMN,
    CPF_COLUMN,
    *CARGO_COLUMNS,
    "registration_number",
)

# Characters with meaning inside a PostgREST ``or=(...)`` expression
POSTGREST_RESERVED_CHARS: str = ',()"\\'

# ---------------------------------------------------------------------------
# Statistics buckets
# ---------------------------------------------------------------------------
AREA_ADMINISTRATIVA: str = "Administrativa"
AREA_ASSISTENCIAL: str = "Assistencial"
PCD_SIM: str = "Sim"
PCD_NAO: str = "Não"

# ---------------------------------------------------------------------------
# Legacy column mapping (spreadsheet / wide schema -> canonical)
# Values are canonical top-level columns or ``data.<key>`` paths.
# ---------------------------------------------------------------------------
LEGACY_COLUMN_MAP: dict[str, str] = {
    "NOMECOMPLETO": "name",
    "AREAATUACAO": "area",
    "NOMESOCIAL": "data.nome_social",
    "CPF": "data.cpf",
    "VAGAPCD": "data.vaga_pcd",
    "LAUDO MEDICO": "data.laudo_medico",
    "CURRICULOVITAE": "data.curriculo",
    "DOCUMENTOSPESSOAIS": "data.documentos_pessoais",
    "DOCUMENTOSPROFISSIONAIS": "data.documentos_profissionais",
    "DIPLOMACERTIFICADO": "data.diploma",
    "DOCUMENTOSCONSELHO": "data.carteira_conselho",
    "ESPECIALIZACOESCURSOS": "data.cursos",
    "notes": "data.notes",
}

# Legacy columns present in both old shapes; their presence marks a row as
# legacy rather than normalized.
LEGACY_MARKER_COLUMNS: frozenset[str] = frozenset(
    {"NOMECOMPLETO", "AREAATUACAO", "CARGOPRETENDIDO", "CPF"}
)

# System columns the wide schema stored with real types
LEGACY_SYSTEM_COLUMNS: tuple[str, ...] = (
    "registration_number",
    "status",
    "assigned_to",
    "assigned_by",
    "assigned_at",
    "priority",
)
