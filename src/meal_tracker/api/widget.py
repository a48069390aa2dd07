"""Static HTML for the meal tracker widget."""

WIDGET_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>AI Meal Tracker</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem auto; max-width: 28rem; }
      h1 { margin-bottom: 0.5rem; }
      .card { border: 1px solid #d1fae5; border-radius: 1rem; padding: 1rem; margin-bottom: 1.5rem; }
      .progress { height: 0.75rem; background: #d1fae5; border-radius: 1rem; overflow: hidden; }
      .progress div { height: 100%; background: #fb923c; }
      .chart { display: flex; align-items: flex-end; gap: 0.25rem; height: 4rem; }
      .chart div { flex: 1; text-align: center; font-size: 10px; color: #9ca3af; }
      .chart span { display: block; background: #fb923c; border-radius: 0.5rem 0.5rem 0 0; min-height: 8px; }
      #drop { border: 2px dashed #a7f3d0; border-radius: 1rem; padding: 2.5rem; text-align: center; cursor: pointer; }
      #drop.busy { border-color: #fdba74; background: #fff7ed; }
      .meal { display: flex; gap: 1rem; align-items: center; margin-bottom: 0.75rem; }
      .meal img { width: 4rem; height: 4rem; object-fit: cover; border-radius: 0.5rem; }
      #error { color: #ef4444; font-size: 0.875rem; text-align: center; }
    </style>
  </head>
  <body>
    <h1>AI Meal Tracker</h1>
    <div class="card">
      <strong>Today's Calories</strong> <span id="goal"></span>
      <div><span id="today">0</span> kcal</div>
      <div class="progress"><div id="bar" style="width: 0%"></div></div>
      <p><strong>This Week</strong> <span id="week-total"></span></p>
      <div class="chart" id="chart"></div>
    </div>
    <div id="drop">Click or drag a meal photo here</div>
    <input id="file" type="file" accept="image/*" hidden />
    <p id="error"></p>
    <h2>Today's Meals <button id="clear">Clear All</button></h2>
    <div id="meals"></div>
    <script>
      const drop = document.getElementById('drop');
      const fileInput = document.getElementById('file');
      let busy = false;

      function render(summary) {
        document.getElementById('goal').textContent = 'Goal: ' + summary.goal_calories + ' kcal';
        document.getElementById('today').textContent = summary.today_calories;
        document.getElementById('bar').style.width = summary.progress_percent + '%';
        document.getElementById('week-total').textContent = 'Total: ' + summary.week_total + ' kcal';
        document.getElementById('chart').innerHTML = summary.week.map(bar =>
          '<div><span title="' + bar.calories + ' kcal" style="height:' +
          (bar.ratio * 56 + 8) + 'px"></span>' + bar.weekday + '</div>'
        ).join('');
        const meals = document.getElementById('meals');
        meals.replaceChildren();
        if (!summary.meals.length) {
          meals.textContent = 'No meals tracked yet. Upload your first meal!';
        }
        for (const meal of summary.meals) {
          const row = document.createElement('div');
          row.className = 'meal';
          const img = document.createElement('img');
          img.src = meal.image;
          img.alt = 'Meal';
          const info = document.createElement('div');
          const calories = document.createElement('strong');
          calories.textContent = meal.calories + ' kcal';
          info.append(calories, document.createElement('br'), meal.time);
          row.append(img, info);
          meals.append(row);
        }
        document.getElementById('error').textContent = summary.error || '';
      }

      async function refresh() {
        const res = await fetch('/summary');
        render(await res.json());
      }

      async function upload(file) {
        if (busy || !file) return;
        busy = true;
        drop.classList.add('busy');
        drop.textContent = 'Analyzing meal...';
        try {
          const res = await fetch('/meals', {
            method: 'POST',
            headers: { 'Content-Type': file.type || 'application/octet-stream' },
            body: file
          });
          const data = await res.json();
          if (!res.ok) {
            document.getElementById('error').textContent = data.detail;
            return;
          }
          render(data.summary);
          if (data.warning) document.getElementById('error').textContent = data.warning;
        } finally {
          busy = false;
          drop.classList.remove('busy');
          drop.textContent = 'Click or drag a meal photo here';
        }
      }

      drop.onclick = () => { if (!busy) fileInput.click(); };
      drop.ondragover = event => event.preventDefault();
      drop.ondrop = event => { event.preventDefault(); upload(event.dataTransfer.files[0]); };
      fileInput.onchange = () => { upload(fileInput.files[0]); fileInput.value = ''; };
      document.getElementById('clear').onclick = async () => {
        const res = await fetch('/meals', { method: 'DELETE' });
        const data = await res.json();
        if (!res.ok) {
          document.getElementById('error').textContent = data.detail;
          return;
        }
        render(data.summary);
        if (data.warning) document.getElementById('error').textContent = data.warning;
      };
      refresh();
    </script>
  </body>
</html>
"""
