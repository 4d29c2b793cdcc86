"""Supabase repository for cases."""

from dataclasses import dataclass

from supabase import Client

from legal_aid_client.domain.cases import Case, CaseDraft
from legal_aid_client.domain.errors import RemoteCallError, RowDecodeError
from legal_aid_client.viewmodels.appointments import CaseRepository

TABLE = "Cases"


@dataclass
class SupabaseCaseRepository(CaseRepository):
    """Supabase implementation for cases."""

    client: Client

    def create_case(self, draft: CaseDraft) -> Case:
        """Insert a case row and return it."""
        response = (
            self.client.table(TABLE)
            .insert(
                {
                    "nombre_abogado": draft.lawyer_name,
                    "nombre_cliente": draft.client_name,
                    "NUC": draft.nuc,
                    "carpeta_judicial": draft.judicial_file,
                    "carpeta_investigacion": draft.investigation_file,
                    "acceso_fv": draft.prosecutor_portal_access,
                    "pass_fv": draft.prosecutor_portal_password,
                    "fiscal_titular": draft.lead_prosecutor,
                    "id_unidad_investigacion": draft.investigation_unit_id,
                    "drive": draft.drive_url,
                    "status": draft.status,
                }
            )
            .execute()
        )
        if not response.data:
            raise RemoteCallError("Failed to create case")
        return _parse_case(response.data[0])


def _parse_case(row: dict[str, object]) -> Case:
    try:
        unit_id = row.get("id_unidad_investigacion")
        return Case(
            id=int(row["id"]),
            lawyer_name=str(row.get("nombre_abogado") or ""),
            client_name=str(row.get("nombre_cliente") or ""),
            nuc=str(row.get("NUC") or ""),
            judicial_file=str(row.get("carpeta_judicial") or ""),
            investigation_file=str(row.get("carpeta_investigacion") or ""),
            prosecutor_portal_access=str(row.get("acceso_fv") or ""),
            prosecutor_portal_password=str(row.get("pass_fv") or ""),
            lead_prosecutor=str(row.get("fiscal_titular") or ""),
            investigation_unit_id=int(unit_id) if unit_id is not None else None,
            drive_url=str(row.get("drive") or ""),
            status=int(row.get("status") or 0),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise RowDecodeError(TABLE, row, str(exc)) from exc
