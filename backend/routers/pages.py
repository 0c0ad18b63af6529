import json

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse, RedirectResponse

router = APIRouter()

LOGIN_PAGE = """<!doctype html>
<html>
<head><meta charset="utf-8"><title>Admin login</title></head>
<body>
  <h1>Admin login</h1>
  <form id="login" method="post" action="/api/auth/login">
    <label>Email <input name="username" type="email" required></label>
    <label>Password <input name="password" type="password" required></label>
    <button type="submit">Sign in</button>
  </form>
  <p id="error" hidden>Invalid credentials</p>
  <script>
    document.getElementById("login").addEventListener("submit", async (ev) => {{
      ev.preventDefault();
      const res = await fetch(ev.target.action, {{method: "POST", body: new FormData(ev.target)}});
      if (res.ok) {{ window.location.href = {next_path}; }}
      else {{ document.getElementById("error").hidden = false; }}
    }});
  </script>
</body>
</html>
"""


@router.get("/login", response_class=HTMLResponse)
async def login_page(next: str = Query("/")):
    # Only same-site paths are followed after login.
    next_path = next if next.startswith("/") and not next.startswith("//") else "/"
    return LOGIN_PAGE.format(next_path=json.dumps(next_path).replace("<", "\\u003c"))


@router.get("/", include_in_schema=False)
async def index():
    return RedirectResponse("/docs")
