# views.py — server-rendered pages (Jinja string templates, autoescaped)
from flask import render_template_string
from markupsafe import Markup

PAGE = """<!doctype html>
<html lang="en"><head>
<meta charset="utf-8"><meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{ title }}</title>
<style>
:root{--bg:#0b0c0f;--card:#111827;--mut:#9ca3af;--fg:#e5e7eb;--accent:#6366f1;--bad:#ef4444}
*{box-sizing:border-box}body{margin:0;min-height:100vh;background:var(--bg);color:var(--fg);font-family:system-ui,Segoe UI,Roboto}
main{max-width:900px;margin:0 auto;padding:28px}
.card{background:var(--card);padding:18px;border-radius:14px;box-shadow:0 2px 12px rgba(0,0,0,.35)}
h1,h2{margin:6px 0 12px} p{color:var(--mut)}
.btn{display:inline-block;padding:10px 14px;border-radius:10px;background:var(--accent);color:#fff;text-decoration:none;border:none;cursor:pointer}
.bad{background:var(--bad);color:#fff;border:none;border-radius:10px;padding:10px 14px;cursor:pointer}
.inline{display:inline-block;margin-left:8px}
.row{display:flex;gap:10px;flex-wrap:wrap}
.rooms{display:grid;gap:10px}
.roomrow{display:flex;align-items:center;gap:10px}
input[type=text],input[type=file]{flex:1;min-width:220px;padding:10px;border-radius:10px;border:1px solid #333;background:#0f1420;color:#fff}
.grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(180px,1fr));gap:14px;margin-top:12px}
.tile{background:#0f1420;border:1px solid #1f2937;border-radius:12px;padding:10px}
.tile img,.tile video{width:100%;height:140px;object-fit:cover;border-radius:8px;background:#0b0c0f}
.ph{height:140px;display:flex;align-items:center;justify-content:center;background:#0b0c0f;border-radius:8px}
small{color:var(--mut)}
.center{display:flex;align-items:center;justify-content:center;min-height:50vh}
</style></head><body>
<main class="card">
{{ body }}
</main>
</body></html>"""

HOME = """
<h1>Rooms</h1>
<div class="row">
  {% if admin %}<button class="btn bad" id="logoutBtn">Exit admin</button>
  {% else %}<button class="btn" id="adminBtn">Admin</button>{% endif %}
</div>

<h2>Existing rooms</h2>
<div class="rooms">
  {% for r in rooms %}
  <div class="roomrow">
    <a class="btn" href="{{ url_for('rooms.room_page', room=r) }}">{{ r }}</a>
    {% if admin %}
    <form method="post" action="{{ url_for('files.delete_room', room=r) }}" class="inline"
          onsubmit="return confirm('Delete room &quot;{{ r }}&quot; and ALL files?');">
      <input type="hidden" name="confirm" value="{{ r }}">
      <button class="bad">Delete</button>
    </form>
    {% endif %}
  </div>
  {% else %}
  <p><i>No rooms yet.</i></p>
  {% endfor %}
</div>

{% if can_create %}
<h2 style="margin-top:18px">Create room</h2>
<form method="post" action="{{ url_for('rooms.create_room') }}" class="row">
  <input type="text" name="room" placeholder="room-name (letters/numbers/dashes)" required pattern="[a-z0-9-]{1,40}">
  <button class="btn">Create</button>
</form>
<p><small>Lowercase letters, numbers, dashes; max 40 chars.</small></p>
{% endif %}

<script>
  const adminBtn = document.getElementById('adminBtn');
  const logoutBtn = document.getElementById('logoutBtn');
  if (adminBtn){
    adminBtn.onclick = async () => {
      const pass = prompt('Admin password');
      if(!pass) return;
      const r = await fetch('{{ url_for("admin.login") }}', { method:'POST', headers:{'Content-Type':'application/json'}, body: JSON.stringify({ pass }) });
      if(r.ok) location.reload(); else alert('Wrong password');
    };
  }
  if (logoutBtn){
    logoutBtn.onclick = async () => {
      await fetch('{{ url_for("admin.logout") }}', { method:'POST' });
      location.reload();
    };
  }
</script>
"""

AGE_GATE = """
<div class="center">
  <div>
    <h1>18+</h1>
    <p>You must confirm your age to enter{% if room %} <b>{{ room }}</b>{% endif %}.</p>
    <form method="post" action="{{ url_for('age.age_confirm') }}" class="row">
      <input type="hidden" name="next" value="{{ next }}">
      {% if room %}<input type="hidden" name="room" value="{{ room }}">{% endif %}
      <button class="btn" type="submit">I am 18 or older</button>
      <a class="btn bad" href="https://google.com" rel="noopener">No</a>
    </form>
  </div>
</div>
"""

ROOM = """
<h1>Room: {{ room }}</h1>
<p>Upload and view files for this room.{% if admin %} <b>(Admin)</b>{% endif %}</p>

<form class="row" method="post" enctype="multipart/form-data" action="{{ url_for('files.upload', room=room) }}">
  <input type="file" name="file" required>
  <button class="btn" type="submit">Upload</button>
  <a class="btn" href="{{ url_for('rooms.home') }}">Rooms</a>
</form>
<p><small>Max {{ max_mb }} MB per file.</small></p>

{% if admin %}
<h2 style="margin-top:18px">Danger zone</h2>
<form class="row" id="delRoomForm" method="post" action="{{ url_for('files.delete_room', room=room) }}">
  <input type="text" name="confirm" id="confirmRoom" placeholder="type: {{ room }}" required autocomplete="off">
  <button class="bad" id="delRoomBtn" type="submit" disabled>Delete Room</button>
</form>
<script>
  (()=>{
    const inp=document.getElementById('confirmRoom');
    const btn=document.getElementById('delRoomBtn');
    const must={{ room|tojson }};
    const enable=()=>{ btn.disabled = (inp.value.trim() !== must); };
    inp.addEventListener('input', enable); enable();
    document.getElementById('delRoomForm').addEventListener('submit',(e)=>{
      if(inp.value.trim() !== must){ e.preventDefault(); alert('Please type the room name exactly.'); }
      else if(!confirm('Delete room "'+must+'" and ALL its files?')){ e.preventDefault(); }
    });
  })();
</script>
{% endif %}

<h2 style="margin-top:18px">Files</h2>
<div class="grid">
  {% for f in files %}
  {% set src = url_for('files.serve_file', room=room, name=f.name) %}
  <div class="tile">
    {% if f.is_image %}<a href="{{ src }}" target="_blank" rel="noopener"><img src="{{ src }}" alt="{{ f.name }}" loading="lazy"></a>
    {% elif f.is_video %}<video src="{{ src }}" controls preload="metadata"></video>
    {% else %}<div class="ph"><small>{{ f.mime }}</small></div>{% endif %}
    <div style="margin-top:8px"><small>{{ f.name }} · {{ f.size_label }}</small></div>
    <div class="row" style="margin-top:8px">
      <a class="btn" href="{{ url_for('files.download_file', room=room, name=f.name) }}">Download</a>
      {% if admin %}
      <form method="post" action="{{ url_for('files.delete_file', room=room, name=f.name) }}" onsubmit="return confirm('Delete {{ f.name }}?')">
        <button class="bad">Delete</button>
      </form>
      {% endif %}
    </div>
  </div>
  {% else %}
  <p><i>No files yet.</i></p>
  {% endfor %}
</div>
"""


def page(title, body_template, **ctx):
    body = render_template_string(body_template, **ctx)
    return render_template_string(PAGE, title=title, body=Markup(body))


def home_page(rooms, admin, can_create):
    return page("Rooms", HOME, rooms=rooms, admin=admin, can_create=can_create)


def age_gate_page(next_url, room=None):
    return page("18+ Check", AGE_GATE, next=next_url, room=room)


def room_page(room, files, admin, max_bytes):
    max_mb = round(max_bytes / 1024 / 1024, 1)
    return page(f"{room} – Room", ROOM, room=room, files=files, admin=admin, max_mb=max_mb)
