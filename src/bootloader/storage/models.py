"""
Environment state document.

One ``State`` describes a single environment. Each block stays at its zero
value until the provisioning step that owns it has run, so an all-zero
``State`` means "no environment".
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StateModel(BaseModel):
    """Base for state blocks; fields load by JSON key or attribute name.

    Explicit ``null`` values (empty lists and maps in older writers' files)
    load as the field's zero value.
    """

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def is_empty(self) -> bool:
        return self == type(self)()


class AWS(StateModel):
    access_key_id: str = Field(default="", alias="accessKeyId")
    secret_access_key: str = Field(default="", alias="secretAccessKey")
    region: str = ""
    zones: list[str] = Field(default_factory=list)


class Azure(StateModel):
    subscription_id: str = Field(default="", alias="subscriptionId")
    tenant_id: str = Field(default="", alias="tenantId")
    client_id: str = Field(default="", alias="clientId")
    client_secret: str = Field(default="", alias="clientSecret")
    region: str = ""
    zones: list[str] = Field(default_factory=list)


class GCP(StateModel):
    service_account_key: str = Field(default="", alias="serviceAccountKey")
    project_id: str = Field(default="", alias="projectID")
    zone: str = ""
    region: str = ""
    zones: list[str] = Field(default_factory=list)


class LB(StateModel):
    type: str = ""
    cert: str = ""
    key: str = ""
    chain: str = ""
    domain: str = ""


class KeyPair(StateModel):
    name: str = ""
    private_key: str = Field(default="", alias="privateKey")
    public_key: str = Field(default="", alias="publicKey")


class Jumpbox(StateModel):
    enabled: bool = False
    url: str = ""
    variables: str = ""
    manifest: str = ""
    state: dict[str, Any] = Field(default_factory=dict)


class BOSH(StateModel):
    director_name: str = Field(default="", alias="directorName")
    director_username: str = Field(default="", alias="directorUsername")
    director_password: str = Field(default="", alias="directorPassword")
    director_address: str = Field(default="", alias="directorAddress")
    director_ssl_ca: str = Field(default="", alias="directorSSLCA")
    director_ssl_certificate: str = Field(default="", alias="directorSSLCertificate")
    director_ssl_private_key: str = Field(default="", alias="directorSSLPrivateKey")
    variables: str = ""
    manifest: str = ""
    state: dict[str, Any] = Field(default_factory=dict)
    user_ops_file: str = Field(default="", alias="userOpsFile")


# Never written to disk; present only in the in-memory working copy.
SECRET_FIELDS: dict[str, set[str]] = {
    "aws": {"access_key_id", "secret_access_key"},
    "azure": {"client_secret"},
    "gcp": {"service_account_key", "project_id"},
}


class State(StateModel):
    """The persisted environment document."""

    version: int = 0
    iaas: str = ""
    id: str = ""
    no_director: bool = Field(default=False, alias="noDirector")
    aws: AWS = Field(default_factory=AWS)
    azure: Azure = Field(default_factory=Azure)
    gcp: GCP = Field(default_factory=GCP)
    key_pair: KeyPair = Field(default_factory=KeyPair, alias="keyPair")
    jumpbox: Jumpbox = Field(default_factory=Jumpbox)
    bosh: BOSH = Field(default_factory=BOSH)
    env_id: str = Field(default="", alias="envID")
    tf_state: str = Field(default="", alias="tfState")
    lb: LB = Field(default_factory=LB)
    latest_tf_output: str = Field(default="", alias="latestTFOutput")

    @property
    def region(self) -> str:
        """Region of the configured IaaS."""
        return self._iaas_block().region

    @property
    def zones(self) -> list[str]:
        return list(self._iaas_block().zones)

    def with_zones(self, zones: list[str]) -> State:
        """Return a copy with ``zones`` recorded on the configured IaaS block."""
        block_name = self.iaas or "gcp"
        block = getattr(self, block_name).model_copy(update={"zones": list(zones)})
        return self.model_copy(update={block_name: block})

    def has_director(self) -> bool:
        return self.bosh.director_name != ""

    def redacted(self) -> dict[str, Any]:
        """JSON-ready mapping of the document without secret fields."""
        return self.model_dump(mode="json", by_alias=True, exclude=SECRET_FIELDS)

    def _iaas_block(self) -> AWS | Azure | GCP:
        if self.iaas == "aws":
            return self.aws
        if self.iaas == "azure":
            return self.azure
        return self.gcp
