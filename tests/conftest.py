"""Shared fixtures: a saved i2pd web console main page and a settings factory."""

from __future__ import annotations

import pytest

from i2pd_exporter.config import Settings

UPSTREAM = "http://i2pd.test:7070/"

CONSOLE_HTML = """\
<!DOCTYPE html>
<html lang="en">
<head><title>Purple I2P Webconsole</title></head>
<body>
<div class="main">
<b>Uptime:</b> 2 days, 3 hours, 4 minutes, 5 seconds<br>
<b>Network status:</b> OK<br>
<b>Network status v6:</b> Firewalled<br>
<b>Tunnel creation success rate:</b> 37%<br>
<b>Received:</b> 10.5 MiB (100.5 KiB/s)<br>
<b>Sent:</b> 2 GiB (1.5 KiB/s)<br>
<b>Transit:</b> 800.25 KiB (0 B/s)<br>
<b>Data path:</b> /var/lib/i2pd<br>
<div class='slide'>
<label for='slide-info'>Hidden content. Press on text to see.</label>
<input type='checkbox' id='slide-info'/>
<div class='slidecontent'>
<b>Router Ident:</b> abcdefghijklmnop<br>
<b>Router Family:</b> <br>
<b>Router Caps:</b> LU<br>
<b>Version:</b> 2.50.2<br>
<b>Our external address:</b><br>
<table class="extaddr"><tbody>
<tr>
<td>NTCP2</td>
<td>203.0.113.7:24567</td>
</tr>
<tr>
<td>SSU2</td>
<td>203.0.113.7:24568</td>
</tr>
<tr>
<td>NTCP2V6</td>
<td>[2001:db8::7]:24567</td>
</tr>
</tbody></table>
</div>
</div>
<br>
<b>Routers:</b> 3017 <b>Floodfills:</b> 512 <b>LeaseSets:</b> 19<br>
<b>Client Tunnels:</b> 12 <b>Transit Tunnels:</b> 345<br>
<br>
<table class="services"><caption>Services</caption><tbody>
<tr><td>HTTP Proxy</td><td class='enabled'>Enabled</td></tr>
<tr><td>SOCKS Proxy</td><td class='enabled'>Enabled</td></tr>
<tr><td>BOB</td><td class='disabled'>Disabled</td></tr>
<tr><td>SAM</td><td class='enabled'>Enabled</td></tr>
<tr><td>I2CP</td><td class='disabled'>Disabled</td></tr>
<tr><td>I2PControl</td><td class='disabled'>Disabled</td></tr>
</tbody></table>
</div>
</body>
</html>
"""


@pytest.fixture()
def console_html() -> str:
    return CONSOLE_HTML


@pytest.fixture()
def exporter_settings() -> Settings:
    return Settings(
        web_console_url=UPSTREAM,
        http_timeout=5.0,
        listen_addr="127.0.0.1:9700",
        log_level="DEBUG",
        exporter_version="9.9.9-test",
    )
