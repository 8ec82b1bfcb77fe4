from unittest.mock import AsyncMock, Mock

import pytest

from hyprspaces import ipc
from hyprspaces.models import DispatchError, HyprspacesError


@pytest.fixture
def mock_open_connection(mocker):
    reader = AsyncMock()
    # StreamWriter methods write and close are synchronous, drain and wait_closed are async
    writer = Mock()
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()

    mock_connect = mocker.patch("asyncio.open_unix_connection", return_value=(reader, writer))
    return mock_connect, reader, writer


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("openwindow>>55d1,1,kitty,~\n", ("event_openwindow", "55d1,1,kitty,~")),
        ("activewindowv2>>\n", ("event_activewindowv2", "")),
        ("windowtitlev2>>55d1,a >> b\n", ("event_windowtitlev2", "55d1,a >> b")),
        ("garbage\n", None),
    ],
)
def test_parse_event(raw, expected):
    assert ipc.parse_event(raw) == expected


@pytest.mark.asyncio
async def test_hyprctl_connection_context_manager(mock_open_connection):
    mock_connect, reader, writer = mock_open_connection
    logger = Mock()

    async with ipc.hyprctl_connection(logger) as (r, w):
        assert r == reader
        assert w == writer

    writer.close.assert_called_once()
    writer.wait_closed.assert_awaited_once()


@pytest.mark.asyncio
async def test_hyprctl_connection_error(mocker):
    mocker.patch("asyncio.open_unix_connection", side_effect=FileNotFoundError)
    logger = Mock()

    with pytest.raises(HyprspacesError):
        async with ipc.hyprctl_connection(logger):
            pass

    logger.critical.assert_called_with("hyprctl socket not found! is it running ?")


@pytest.mark.asyncio
async def test_get_response(mock_open_connection):
    mock_connect, reader, writer = mock_open_connection
    logger = Mock()
    reader.read.return_value = b'{"status": "ok"}'

    result = await ipc.get_response(b"command", logger)

    assert result == {"status": "ok"}
    writer.write.assert_called_with(b"command")
    writer.drain.assert_awaited_once()


@pytest.mark.asyncio
async def test_hyprctl_json(mock_open_connection):
    mock_connect, reader, writer = mock_open_connection
    reader.read.return_value = b'[{"id": 1, "name": "1"}]'

    result = await ipc.hyprctl_json("workspaces", logger=Mock())

    assert result == [{"id": 1, "name": "1"}]
    writer.write.assert_called_with(b"-j/workspaces")


@pytest.mark.asyncio
async def test_hyprctl_json_retries_on_reset(mocker):
    get_response = mocker.patch("hyprspaces.ipc.get_response", side_effect=[ConnectionResetError(), {"address": "0x1"}])
    logger = Mock()

    result = await ipc.hyprctl_json("activewindow", logger=logger)

    assert result == {"address": "0x1"}
    assert get_response.call_count == 2
    logger.warning.assert_called_once()


@pytest.mark.asyncio
async def test_hyprctl_json_gives_up(mocker):
    mocker.patch("hyprspaces.ipc.get_response", side_effect=ConnectionResetError())
    mocker.patch("asyncio.sleep", new_callable=AsyncMock)
    logger = Mock()

    with pytest.raises(ConnectionResetError):
        await ipc.hyprctl_json("clients", logger=logger)

    logger.error.assert_called_with("ipc connection failed.")


@pytest.mark.asyncio
async def test_dispatcher_execute(mock_open_connection):
    mock_connect, reader, writer = mock_open_connection
    reader.read.return_value = b"ok"

    await ipc.Dispatcher(Mock()).execute("dispatch workspace 3")

    writer.write.assert_called_with(b"/dispatch workspace 3")


@pytest.mark.asyncio
async def test_dispatcher_execute_failure(mock_open_connection):
    mock_connect, reader, writer = mock_open_connection
    reader.read.return_value = b"Invalid dispatcher"

    with pytest.raises(DispatchError, match="Invalid dispatcher"):
        await ipc.Dispatcher(Mock()).execute("dispatch nope")


@pytest.mark.asyncio
async def test_dispatcher_execute_no_socket(mocker):
    mocker.patch("asyncio.open_unix_connection", side_effect=FileNotFoundError)

    with pytest.raises(DispatchError):
        await ipc.Dispatcher(Mock()).execute("dispatch workspace 3")

    mocker.patch("asyncio.open_unix_connection", side_effect=ConnectionRefusedError)
    with pytest.raises(DispatchError):
        await ipc.Dispatcher(Mock()).execute("dispatch workspace 3")


@pytest.mark.asyncio
async def test_dispatcher_execute_all_stops_on_failure(mocker):
    dispatcher = ipc.Dispatcher(Mock())
    execute = mocker.patch.object(dispatcher, "execute", side_effect=[None, DispatchError("boom"), None])

    with pytest.raises(DispatchError):
        await dispatcher.execute_all(["a", "b", "c"])

    assert execute.call_count == 2


@pytest.mark.asyncio
async def test_dispatcher_run_shell(mocker):
    proc = Mock(returncode=1)
    proc.communicate = AsyncMock(return_value=(b"boom\n", None))
    shell = mocker.patch("asyncio.create_subprocess_shell", new_callable=AsyncMock, return_value=proc)
    logger = Mock()

    assert await ipc.Dispatcher(logger).run_shell("false") == 1

    assert shell.call_args[0][0] == "false"
    logger.error.assert_called_with("Failed to execute %s: %s", "false", "boom")
