"""Tests for RpcSession call chaining, key auth and session capture."""

import logging

import httpx
import pytest

from src.client import RpcSession, Transport, static_identity
from src.client.auth import compute_signature
from src.client.exceptions import AuthenticationError, MissingMethodError, RemoteFaultError, TransportError
from src.client.types import ResponseState

HOST = "http://example.test/xmlrpc"


@pytest.fixture
def fixed_auth(monkeypatch):
    monkeypatch.setattr("src.client.auth.make_nonce", lambda: "n1")
    monkeypatch.setattr("src.client.auth.time.time", lambda: 1700000000.5)


class TestConstruction:
    def test_persist_defaults_false_without_api_key(self, session) -> None:
        assert session.persist is False
        assert session.api_key is None
        assert session.host == HOST

    def test_persist_defaults_true_with_api_key(self, keyed_session) -> None:
        assert keyed_session.persist is True
        assert keyed_session.domain == "d"

    def test_persist_can_be_overridden(self, transport) -> None:
        s = RpcSession(HOST, "k", persist=False, transport=transport)
        assert s.persist is False

    def test_domain_defaults_to_host_identity(self, session) -> None:
        assert session.domain == "client.test"

    def test_initial_state(self, session) -> None:
        assert session.session_id is None
        assert session.get_response().state is ResponseState.UNSET
        assert session.headers == {}


class TestPlainCalls:
    def test_list_methods_sends_no_params(self, session, transport) -> None:
        transport.queue(["system.listMethods", "user.login"])
        result = session.call("system.listMethods")
        assert result is session
        assert transport.calls == [("system.listMethods", [], {})]
        assert session.response.value == ["system.listMethods", "user.login"]

    def test_params_are_forwarded_in_order(self, session, transport) -> None:
        session.call("math.add", 1, 2, {"x": [3]})
        assert transport.calls[0][1] == [1, 2, {"x": [3]}]

    def test_invoke_is_an_alias(self, session, transport) -> None:
        session.invoke("system.ping")
        assert transport.methods == ["system.ping"]

    def test_no_auth_when_persist_off_even_with_token(self, transport) -> None:
        s = RpcSession(HOST, "k", domain="d", persist=False, transport=transport)
        transport.queue({"sessid": "S1"}, True)
        s.call("user.login", "alice", "secret").call("node.get", 5)
        assert s.session_id is None
        assert transport.calls[1][1] == [5]

    def test_falsy_result_is_success(self, session, transport) -> None:
        transport.queue(0)
        session.call("count.items")
        assert session.response.is_success
        assert session.response.value == 0

    def test_headers_are_sent(self, session, transport) -> None:
        session.set_headers({"X-Trace": "1"}).call("system.ping")
        assert transport.calls[0][2] == {"X-Trace": "1"}


class TestDynamicDispatch:
    def test_attribute_call(self, session, transport) -> None:
        session.echo("hi")
        assert transport.calls[0][:2] == ("echo", ["hi"])

    def test_dotted_attribute_call(self, session, transport) -> None:
        session.system.listMethods()
        assert transport.methods == ["system.listMethods"]

    def test_item_call_chains(self, keyed_session, transport) -> None:
        transport.queue({"sessid": "S0"}, {"sessid": "S1"}, {"nid": 7})
        keyed_session.system.connect()["user.login"]("alice", "pw")["node.save"]({"title": "t"})
        assert transport.methods == ["system.connect", "user.login", "node.save"]
        assert keyed_session.response.value == {"nid": 7}

    def test_private_names_are_not_remote(self, session) -> None:
        with pytest.raises(AttributeError):
            session._nothing


class TestKeyAuthentication:
    def test_first_call_has_no_auth(self, keyed_session, transport) -> None:
        keyed_session.call("system.connect")
        assert transport.calls[0][1] == []

    def test_session_id_captured(self, keyed_session, transport) -> None:
        transport.queue({"sessid": "S1"})
        keyed_session.call("user.login", "alice", "secret")
        assert keyed_session.session_id == "S1"
        assert keyed_session.response.value == {"sessid": "S1"}
        assert transport.calls[0][1] == ["alice", "secret"]

    def test_auth_tuple_prepended_after_login(self, keyed_session, transport, fixed_auth) -> None:
        transport.queue({"sessid": "S1"}, {"nid": 1})
        keyed_session.call("user.login", "alice", "secret").call("node.save", {"title": "x"})
        sig = compute_signature("k", "1700000000", "d", "n1", "node.save")
        assert transport.calls[1][1] == [(sig, "d", "1700000000", "n1", "S1"), {"title": "x"}]

    def test_expand_auth_splices_fields(self, transport, fixed_auth) -> None:
        s = RpcSession(HOST, "k", domain="d", transport=transport, expand_auth=True)
        transport.queue({"sessid": "S1"}, True)
        s.call("system.connect").call("user.logout")
        sig = compute_signature("k", "1700000000", "d", "n1", "user.logout")
        assert transport.calls[1][1] == [sig, "d", "1700000000", "n1", "S1"]

    def test_new_session_id_replaces_old(self, keyed_session, transport) -> None:
        transport.queue({"sessid": "S1"}, {"sessid": "S2"})
        keyed_session.call("system.connect").call("user.login", "a", "b")
        assert keyed_session.session_id == "S2"
        assert transport.calls[1][1][0][4] == "S1"

    def test_non_mapping_result_keeps_session_id(self, keyed_session, transport) -> None:
        transport.queue({"sessid": "S1"}, ["sessid"])
        keyed_session.call("system.connect").call("list.things")
        assert keyed_session.session_id == "S1"

    def test_missing_api_key_sends_unsigned(self, transport, caplog) -> None:
        s = RpcSession(HOST, "k", domain="d", transport=transport)
        transport.queue({"sessid": "S1"})
        s.call("system.connect").set_api_key(None)
        with caplog.at_level(logging.WARNING):
            s.call("node.get", 1)
        assert transport.calls[1][1] == [1]
        assert "no API key" in caplog.text

    def test_build_auth_params_without_key_raises(self, session) -> None:
        with pytest.raises(AuthenticationError):
            session.build_auth_params("node.save")

    def test_build_auth_params_uses_empty_sessid_before_login(self, keyed_session) -> None:
        assert keyed_session.build_auth_params("system.connect").sessid == ""


class TestFailures:
    def test_fault_records_failure_and_logs(self, keyed_session, transport, caplog) -> None:
        transport.queue(RemoteFaultError(3, "bad method"))
        with caplog.at_level(logging.WARNING, logger="src.client.session"):
            keyed_session.call("bogus")
        resp = keyed_session.get_response()
        assert resp.is_failure
        assert isinstance(resp.error, RemoteFaultError)
        assert resp.error.fault_code == 3
        assert "xmlrpc: bad method (3)" in caplog.text

    def test_failure_short_circuits_when_persisting(self, keyed_session, transport) -> None:
        transport.queue(RemoteFaultError(3, "bad method"))
        keyed_session.call("bogus")
        before = keyed_session.get_response()
        result = keyed_session.call("anything").call("else", 1).call("more")
        assert result is keyed_session
        assert transport.methods == ["bogus"]
        assert keyed_session.get_response() is before

    def test_transport_error_short_circuits(self, keyed_session, transport) -> None:
        transport.queue(TransportError("connection refused"))
        keyed_session.call("system.connect").call("user.login", "a", "b")
        assert transport.methods == ["system.connect"]
        assert isinstance(keyed_session.response.error, TransportError)

    def test_no_short_circuit_without_persist(self, session, transport) -> None:
        transport.queue(TransportError("down"), "pong")
        session.call("system.ping").call("system.ping")
        assert transport.methods == ["system.ping", "system.ping"]
        assert session.response.value == "pong"

    def test_missing_method_is_failure(self, session, transport, caplog) -> None:
        with caplog.at_level(logging.ERROR):
            session.call()
        assert session.response.is_failure
        assert isinstance(session.response.error, MissingMethodError)
        assert transport.calls == []
        assert "missing method name" in caplog.text

    def test_empty_method_is_failure(self, session) -> None:
        session.call("")
        assert isinstance(session.response.error, MissingMethodError)

    def test_raise_for_failure(self, session, transport) -> None:
        transport.queue(RemoteFaultError(1, "denied"))
        with pytest.raises(RemoteFaultError, match="denied"):
            session.call("x").get_response().raise_for_failure()


class TestReset:
    def test_reset_sets_unset_and_resumes(self, keyed_session, transport) -> None:
        transport.queue(TransportError("down"), "ok")
        keyed_session.call("system.connect")
        assert keyed_session.reset() is keyed_session
        assert keyed_session.response.is_unset
        keyed_session.call("system.connect")
        assert transport.methods == ["system.connect", "system.connect"]
        assert keyed_session.response.value == "ok"

    def test_reset_without_logout_keeps_session_id(self, keyed_session, transport) -> None:
        transport.queue({"sessid": "S1"}, RemoteFaultError(5, "denied"), True)
        keyed_session.call("user.login", "a", "b").call("node.delete", 1)
        keyed_session.reset().call("node.get", 1)
        assert keyed_session.session_id == "S1"
        assert transport.calls[2][1][0][4] == "S1"

    def test_logout_then_reset_and_clear(self, keyed_session, transport) -> None:
        transport.queue({"sessid": "S1"}, True, {"nid": 1})
        keyed_session.call("user.login", "a", "b").call("user.logout")
        keyed_session.reset().clear_session().call("node.get", 1)
        assert keyed_session.session_id is None
        assert transport.calls[2][1] == [1]


class TestSetters:
    def test_setters_return_self(self, session) -> None:
        assert session.set_domain("x") is session
        assert session.set_headers({"A": "1"}) is session
        assert session.set_persist() is session
        assert session.set_api_key("k") is session

    def test_set_domain_without_argument_rederives(self, session) -> None:
        session.set_domain("explicit")
        assert session.domain == "explicit"
        session.set_domain()
        assert session.domain == "client.test"

    def test_set_headers_merges_and_keeps_existing(self, session) -> None:
        session.set_headers({"A": "1"}).set_headers({"A": "2", "B": "3"})
        assert session.headers == {"A": "1", "B": "3"}

    def test_set_persist_enables_capture(self, transport) -> None:
        s = RpcSession(HOST, transport=transport, host_identity=static_identity("h"))
        transport.queue({"sessid": "S9"})
        s.set_persist().set_api_key("k").call("system.connect")
        assert s.session_id == "S9"


class TestContextManager:
    def test_close_is_safe_with_custom_transport(self, transport) -> None:
        with RpcSession(HOST, transport=transport) as s:
            s.call("system.ping")
        assert s.response.is_success


class TestTransportFailuresOverHttp:
    def _session(self, handler, **kwargs) -> RpcSession:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return RpcSession(HOST, transport=Transport(HOST, client=client),
                          host_identity=static_identity("client.test"), **kwargs)

    def test_malformed_struct_is_recorded_as_failure(self) -> None:
        body = (
            b"<?xml version=\"1.0\"?><methodResponse><params><param><value>"
            b"<struct><member><value><int>1</int></value></member></struct>"
            b"</value></param></params></methodResponse>"
        )
        s = self._session(lambda r: httpx.Response(200, content=body))
        assert s.call("system.ping") is s
        assert s.get_response().is_failure
        assert isinstance(s.get_response().error, TransportError)

    def test_non_ascii_header_is_recorded_as_failure(self) -> None:
        s = self._session(lambda r: httpx.Response(200), headers={"X-Site": "café"})
        assert s.call("system.ping") is s
        assert s.get_response().is_failure
        assert isinstance(s.get_response().error, TransportError)
