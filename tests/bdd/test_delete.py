from pytest_bdd import scenarios, given, when, then, parsers
from clientmap.cli.main import cli
from clientmap.errors import RemoteError
from clientmap.models import ClientRecord

scenarios("features/delete.feature")

_CLIENTS = [
    ClientRecord(id="1", name="Ana Pérez", phone="099123456"),
    ClientRecord(id="2", name="Bruno Silva", phone="098765432"),
]


@given("the sheet has two clients")
def two_clients(mock_adapter):
    mock_adapter.fetch_all.return_value = list(_CLIENTS)


@given("the sheet rejects deletes")
def rejects_deletes(mock_adapter):
    mock_adapter.delete.side_effect = RemoteError("Row not found")


@when(parsers.parse("the agent deletes client {client_id} and confirms"))
def delete_confirmed(runner, context, client_id):
    context["result"] = runner.invoke(cli, ["clients", "delete", client_id], input="y\n")


@when(parsers.parse("the agent deletes client {client_id} and cancels"))
def delete_cancelled(runner, context, client_id):
    context["result"] = runner.invoke(cli, ["clients", "delete", client_id], input="n\n")


@then(parsers.parse("the sheet deleted client {client_id}"))
def sheet_deleted(mock_adapter, client_id):
    mock_adapter.delete.assert_called_once_with(client_id)


@then("nothing was deleted")
def nothing_deleted(mock_adapter):
    mock_adapter.delete.assert_not_called()


@then("the client list was reloaded")
def list_reloaded(mock_adapter):
    assert mock_adapter.fetch_all.call_count == 2
