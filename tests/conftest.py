"""
Shared fixtures: registry response samples, a fixed clock and a
loopback WHOIS server.
"""

import socket
import threading
from datetime import datetime, timezone

import pytest

FIXED_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)

GG_RESPONSE = """\
Domain:
     google.gg

Domain Status:
     Active
     Delete Prohibited by Registrar

Registrant:
     Google LLC

Registrar:
     MarkMonitor Inc. (http://www.markmonitor.com)

Relevant dates:
     Registered on 30th April 2003
     Registry fee due on 30th April each year

Registration status:
     Registered until cancelled

Name servers:
     ns1.google.com
     ns2.google.com
     ns3.google.com
     ns4.google.com

WHOIS lookup made on Sun, 18 Oct 2026 at 9:30:00 BST

This information has been redacted to comply with European Union data protection law.
"""

JP_RESPONSE = """\
[ JPRS database provides information on network administration. Its use is    ]
[ restricted to network administration purposes.                              ]

Domain Information: [ドメイン情報]
[Domain Name]                   GOOGLE.JP

[登録者名]                      グーグル合同会社
[Registrant]                    Google Japan G.K.

[Name Server]                   ns1.google.com
[Name Server]                   ns2.google.com
[Signing Key]

[登録年月日]                    2005/05/30
[有効期限]                      2026/05/31
[状態]                          Active
[最終更新]                      2025/06/01 01:05:04 (JST)
"""

DE_RESPONSE = """\
Domain: google.de
Nserver: ns1.google.com
Nserver: ns2.google.com
Nserver: ns3.google.com
Nserver: ns4.google.com
Status: connect
Changed: 2018-03-12T21:44:25+01:00
"""

RU_RESPONSE = """\
% TCI Whois Service. Terms of use:
% https://tcinet.ru/documents/whois_ru_rf.pdf (in Russian)

domain:        YANDEX.RU
nserver:       ns1.yandex.ru. 213.180.193.1
nserver:       ns2.yandex.ru. 213.180.199.34
nserver:       ns9.z5h64q92x9.net.
state:         REGISTERED, DELEGATED, VERIFIED
org:           YANDEX, LLC.
taxpayer-id:   7736207543
registrar:     RU-CENTER-RU
admin-contact: https://www.nic.ru/whois
created:       1997-09-23T09:45:07Z
paid-till:     2025-09-30T21:00:00Z
free-date:     2025-11-01
source:        TCI
"""

KR_RESPONSE = """\
query : naver.kr


# ENGLISH

Domain Name                 : naver.kr
Registrant                  : NAVER Corp.
Registered Date             : 2007. 03. 02.
Last Updated Date           : 2021. 04. 07.
Expiration Date             : 2027. 03. 02.
Publishes                   : Y
Authorized Agency           : Gabia, Inc.(http://www.gabia.co.kr)
DNSSEC                      : unsigned

Primary Name Server
   Host Name                : ns1.naver.com

Secondary Name Server
   Host Name                : ns2.naver.com
"""

IT_RESPONSE = """\
Domain:             google.it
Status:             ok
Signed:             no
Created:            1999-12-10 00:00:00
Last Update:        2024-05-24 00:53:27
Expire Date:        2025-04-21

Registrant
  Organization:     Google Ireland Holdings Unlimited Company

Nameservers
  ns1.google.com
  ns2.google.com
  ns3.google.com

"""

GTLD_RESPONSE = """\
   Domain Name: EXAMPLE.COM
   Registry Domain ID: 2336799_DOMAIN_COM-VRSN
   Registrar WHOIS Server: whois.iana.org
   Registrar URL: http://res-dom.iana.org
   Updated Date: 2024-08-14T07:01:34Z
   Creation Date: 1995-08-14T04:00:00Z
   Registry Expiry Date: 2025-08-13T04:00:00Z
   Registrar: RESERVED-Internet Assigned Numbers Authority
   Registrar IANA ID: 376
   Name Server: A.IANA-SERVERS.NET
   Name Server: B.IANA-SERVERS.NET
   DNSSEC: signedDelegation
"""


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


class LoopbackWhoisServer:
    """One-shot TCP server on 127.0.0.1 driven by a handler callable."""

    def __init__(self, handler):
        self.handler = handler
        self.request = b""
        self.client_closed = threading.Event()
        self.release = threading.Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self._sock.settimeout(10)
        self.port = self._sock.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        try:
            conn, _ = self._sock.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(10)
            try:
                while not self.request.endswith(b"\r\n"):
                    data = conn.recv(1024)
                    if not data:
                        return
                    self.request += data
                self.handler(self, conn)
            except OSError:
                return

    def wait_for_client_close(self, conn, timeout=10):
        """Block until the client closes its end."""
        conn.settimeout(timeout)
        try:
            while conn.recv(1024):
                pass
        except OSError:
            return
        self.client_closed.set()

    def stop(self):
        self.release.set()
        self._sock.close()
        self._thread.join(timeout=5)


@pytest.fixture
def whois_server():
    """Factory for loopback servers; all are stopped at teardown."""
    servers = []

    def start(handler):
        server = LoopbackWhoisServer(handler)
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.stop()


def reply_with(text):
    """Handler sending text then closing the connection."""
    def handler(server, conn):
        conn.sendall(text.encode("utf-8"))
    return handler
