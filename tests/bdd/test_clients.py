from pytest_bdd import scenarios, given, when, then, parsers
from clientmap.cli.main import cli
from clientmap.errors import RemoteError
from clientmap.models import ClientRecord

scenarios("features/clients.feature")

_ANA = ClientRecord(
    id="1", name="Ana Pérez", phone="099123456", company="Panadería Sol",
    address="Av. Italia 1234", lat=-34.9, lng=-56.16,
)
_BRUNO = ClientRecord(id="2", name="Bruno Silva", phone="098765432", company="Ferretería Norte")


@given("the sheet has no clients")
def no_clients(mock_adapter):
    mock_adapter.fetch_all.return_value = []


@given("the sheet has two clients")
def two_clients(mock_adapter):
    mock_adapter.fetch_all.return_value = [_ANA, _BRUNO]


@given("the sheet is unreachable")
def sheet_unreachable(mock_adapter):
    mock_adapter.fetch_all.side_effect = RemoteError("Connection refused")


@when("the agent lists clients")
def list_clients(runner, context):
    context["result"] = runner.invoke(cli, ["clients", "list"])


@when(parsers.parse('the agent searches clients for "{term}"'))
def search_clients(runner, context, term):
    context["result"] = runner.invoke(cli, ["clients", "list", "--search", term])


@when(parsers.parse('the agent adds a client named "{name}" with phone "{phone}"'))
def add_client(runner, context, name, phone):
    # name, phone, then accept the defaults for the remaining seven prompts
    context["result"] = runner.invoke(cli, ["clients", "add"], input=f"{name}\n{phone}\n" + "\n" * 7)


@when("the agent renders the map")
def render_map(runner, context, tmp_path):
    context["result"] = runner.invoke(cli, ["map", "--output", str(tmp_path / "clients.html")])


@then(parsers.parse('the sheet received a new client named "{name}"'))
def sheet_received(mock_adapter, name):
    record = mock_adapter.save.call_args[0][0]
    assert record.id is None
    assert record.name == name
