from airtable_utils.airtable.api import AirtableRestAPI
from airtable_utils.airtable.exceptions import NotFoundError
from airtable_utils.airtable.ids import looks_like_table_id


class AirtableMetaAPI(AirtableRestAPI):
    """Read (and extend) the schema of a base through the metadata endpoints."""

    def list_bases(self):
        return list(
            self.paginate(f"{self.meta_url}/bases", "bases", throttle_key="meta")
        )

    def get_base_schema(self):
        return self.get(f"{self.meta_url}/bases/{self.base_id}/tables")

    def get_table_schema(self, table):
        key = "id" if looks_like_table_id(table) else "name"
        for table_schema in self.get_base_schema().get("tables", []):
            if table_schema[key] == table:
                return table_schema
        raise NotFoundError(
            404,
            message=f"Table {table!r} not found in base {self.base_id}",
            error_type="TABLE_NOT_FOUND",
        )

    def field_ids_by_name(self, table):
        return {
            field["name"]: field["id"]
            for field in self.get_table_schema(table).get("fields", [])
        }

    def view_ids_by_name(self, table):
        return {
            view["name"]: view["id"]
            for view in self.get_table_schema(table).get("views", [])
        }

    def create_field(self, table_id, name, field_type, options=None):
        field_settings = {"name": name, "type": field_type}
        if options:
            field_settings["options"] = options
        return self.post(
            f"{self.meta_url}/bases/{self.base_id}/tables/{table_id}/fields",
            json=field_settings,
        )
