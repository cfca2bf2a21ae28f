"""Key Vault operations exposed by the proxy, one forwarded call each."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Operation:
    """A single exposed route."""

    name: str
    method: str
    path: str


# Literal segments are listed before the parameterised routes they would
# otherwise be shadowed by.
KEYVAULT_OPERATIONS: tuple[Operation, ...] = (
    Operation("backupKey", "POST", "/keys/{key_name}/backup"),
    Operation("createKey", "POST", "/keys/{key_name}/create"),
    Operation("verify", "POST", "/keys/{key_name}/{key_version}/verify"),
    Operation("deleteKey", "DELETE", "/keys/{key_name}"),
    Operation("getDeletedKey", "GET", "/deletedkeys/{key_name}"),
    Operation("getSecretVersions", "GET", "/secrets/{secret_name}/versions"),
    Operation("getSecret", "GET", "/secrets/{secret_name}"),
    Operation("getSecret", "GET", "/secrets/{secret_name}/{secret_version}"),
    Operation("getDeletedSecret", "GET", "/deletedsecrets/{secret_name}"),
    Operation("purgeDeletedSecret", "DELETE", "/deletedsecrets/{secret_name}"),
    Operation("setCertificateIssuer", "PUT", "/certificates/issuers/{issuer_name}"),
    Operation("getCertificateOperation", "GET", "/certificates/{certificate_name}/pending"),
    Operation(
        "updateCertificate",
        "PATCH",
        "/certificates/{certificate_name}/{certificate_version}",
    ),
    Operation("deleteStorageAccount", "DELETE", "/storage/{storage_account_name}"),
    Operation("getDeletedStorageAccount", "GET", "/deletedstorage/{storage_account_name}"),
)
