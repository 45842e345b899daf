"""
Presupuestos: HTML Templates
Kept apart from the routes for readability.
"""

BASE_CSS = """
:root{--bg:#f5f6f8;--sf:#fff;--bd:#ccc;--tx:#222;--tx2:#666;--ac:#007BFF;--gn:#28A745;--rd:#d32f2f;--r:5px}
*{box-sizing:border-box}
body{font-family:Arial,sans-serif;background:var(--bg);color:var(--tx);margin:0}
.ctr{max-width:700px;margin:0 auto;padding:20px}
h1{text-align:center;margin-bottom:20px}
.err{color:var(--rd);margin-bottom:15px;font-weight:bold}
.warn{color:#b26a00;margin-bottom:15px}
.fld{margin-bottom:15px}
.fld label{display:block;font-weight:bold;margin-bottom:5px}
.fld input,.fld textarea{width:100%;padding:8px 10px;font-size:14px;border-radius:var(--r);border:1px solid var(--bd);font-family:inherit}
.fld textarea{resize:vertical}
.fecha{display:flex;gap:8px}
.fecha input{text-align:center}
.fecha .dia{flex:1}.fecha .mes,.fecha .anio{flex:2}
.num{color:var(--tx2);font-size:13px;text-align:right;margin-bottom:10px}
.btns{display:flex;gap:10px;margin-top:20px}
.btn{padding:10px 15px;font-size:14px;border-radius:var(--r);border:none;color:#fff;cursor:pointer}
.btn-p{background:var(--ac)}.btn-d{background:var(--gn)}
.preview{margin-top:20px;border:1px solid var(--bd)}
"""

PAGE_FORM = """<!DOCTYPE html><html><head><meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>Presupuesto</title>
<style>{{ css|safe }}</style></head><body>
<div class="ctr">
<h1>Presupuesto</h1>
<div class="num">Nº {{ numero }}</div>

{% if error %}<div class="err">{{ error }}</div>{% endif %}
{% if warning %}<div class="warn">{{ warning }}</div>{% endif %}

<form method="post" action="{{ url_for('presupuestos.generate') }}">
 <div class="fld">
  <label for="cliente">Cliente:</label>
  <input type="text" id="cliente" name="cliente" value="{{ form.cliente }}" placeholder="Nombre del cliente">
 </div>

 <div class="fld">
  <label>Fecha:</label>
  <div class="fecha">
   <input type="text" class="dia" name="dia" value="{{ form.dia }}" placeholder="DD" maxlength="2" data-rule="digits">
   <input type="text" class="mes" name="mes" value="{{ form.mes }}" placeholder="Mes" data-rule="letters">
   <input type="text" class="anio" name="año" value="{{ form['año'] }}" placeholder="AAAA" maxlength="4" data-rule="digits">
  </div>
 </div>

 <div class="fld">
  <label for="precio">Precio Total:</label>
  <input type="text" id="precio" name="precio" value="{{ form.precio }}" placeholder="Ingrese el precio">
 </div>

 <div class="fld">
  <label for="descripcion">Descripción:</label>
  <textarea id="descripcion" name="descripcion" style="height:150px" placeholder="Escriba aquí la descripción detallada...">{{ form.descripcion }}</textarea>
 </div>

 <div class="fld">
  <label for="incluye">Incluye:</label>
  <textarea id="incluye" name="incluye" style="height:80px" placeholder="Incluye...">{{ form.incluye }}</textarea>
 </div>

 <div class="btns">
  <button type="submit" name="action" value="preview" class="btn btn-p">Ver Preview</button>
  <button type="submit" name="action" value="download" class="btn btn-d">Descargar PDF</button>
 </div>
</form>

{% if preview_url %}
<div class="preview">
 <iframe src="{{ preview_url }}" width="100%" height="500px" title="PDF Preview"></iframe>
</div>
{% endif %}
</div>
<script>
// keep the last accepted value when a keystroke breaks the field rule
document.querySelectorAll('.fecha input').forEach(function(el){
 var rule = el.dataset.rule === 'digits' ? /^\\d*$/ : /^[a-zA-Z]*$/;
 el.dataset.prev = el.value;
 el.addEventListener('input', function(){
  if(rule.test(el.value)){el.dataset.prev = el.value}else{el.value = el.dataset.prev}
 });
});
</script>
</body></html>"""
