import json

SHARED_STYLE = r"""
  *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    background: #0f0f0f;
    color: #e0e0e0;
    height: 100vh;
    overflow: hidden;
    display: flex;
    flex-direction: column;
  }

  .topbar {
    display: flex;
    align-items: center;
    gap: 12px;
    padding: 12px 16px;
    border-bottom: 1px solid #1e1e1e;
    flex-shrink: 0;
  }
  .topbar h1 { font-size: 0.95rem; font-weight: 600; color: #fff; }
  .topbar nav { display: flex; gap: 6px; margin-left: 12px; }
  .topbar nav a {
    color: #888;
    text-decoration: none;
    font-size: 0.8rem;
    padding: 4px 10px;
    border-radius: 6px;
  }
  .topbar nav a.active { background: #2e1e3a; color: #a78bfa; }
  .topbar .spacer { flex: 1; }

  .layout { flex: 1; display: flex; overflow: hidden; }

  .sidebar, .params {
    width: 0;
    overflow: hidden;
    flex-shrink: 0;
    background: #141414;
    transition: width 0.3s ease-in-out;
  }
  .sidebar { border-right: 1px solid #1e1e1e; }
  .params { border-left: 1px solid #1e1e1e; }
  .sidebar.open { width: 288px; }
  .params.open { width: 256px; }
  .sidebar-inner { width: 288px; height: 100%; display: flex; flex-direction: column; }
  .params-inner { width: 256px; height: 100%; display: flex; flex-direction: column; }

  .panel-header {
    padding: 14px 16px;
    border-bottom: 1px solid #1e1e1e;
    display: flex;
    align-items: center;
    justify-content: space-between;
  }
  .panel-header h2 { font-size: 0.85rem; font-weight: 600; color: #fff; }

  .history-list { flex: 1; overflow-y: auto; padding: 8px; display: flex; flex-direction: column; gap: 4px; }
  .history-item {
    display: flex;
    gap: 10px;
    width: 100%;
    text-align: left;
    background: transparent;
    color: #e0e0e0;
    border: 1px solid transparent;
    border-radius: 8px;
    padding: 10px;
    box-shadow: none;
  }
  .history-item:hover { background: #1e1e1e; }
  .history-item.active { background: #1e1e1e; border-color: #4c3a78; }
  .history-thumb {
    width: 40px; height: 40px;
    border-radius: 6px;
    background: #222;
    flex-shrink: 0;
    overflow: hidden;
    display: flex;
    align-items: center;
    justify-content: center;
    color: #555;
    font-size: 0.9rem;
  }
  .history-thumb img { width: 100%; height: 100%; object-fit: cover; }
  .history-text { min-width: 0; flex: 1; }
  .history-text p { font-size: 0.75rem; white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }
  .history-meta { display: flex; gap: 6px; align-items: center; margin-top: 4px; font-size: 0.65rem; color: #777; }
  .badge {
    font-size: 0.62rem;
    padding: 1px 6px;
    border-radius: 4px;
    background: #2e1e3a;
    color: #a78bfa;
  }
  .empty-hint { padding: 48px 16px; text-align: center; font-size: 0.75rem; color: #666; }

  .main { flex: 1; overflow-y: auto; padding: 20px 24px 80px; display: flex; flex-direction: column; gap: 16px; }
  .main-inner { max-width: 880px; width: 100%; margin: 0 auto; display: flex; flex-direction: column; gap: 16px; }

  .params-body { padding: 16px; display: flex; flex-direction: column; gap: 20px; overflow-y: auto; }
  .field label, .section-label {
    display: block;
    font-size: 0.68rem;
    text-transform: uppercase;
    letter-spacing: 0.5px;
    color: #888;
    margin-bottom: 6px;
  }

  select {
    width: 100%;
    background: #1a1a1a;
    color: #e0e0e0;
    border: 1px solid #2a2a2a;
    border-radius: 8px;
    padding: 8px 12px;
    font-size: 0.82rem;
    cursor: pointer;
    outline: none;
    transition: border-color 0.2s;
  }
  select:hover, select:focus { border-color: #8b5cf6; }

  .quality-switch {
    display: flex;
    align-items: center;
    justify-content: space-between;
    background: #1a1a1a;
    border-radius: 8px;
    padding: 10px 12px;
    font-size: 0.82rem;
    color: #777;
  }
  .quality-switch .on { color: #fff; font-weight: 600; }

  .settings-summary { display: flex; flex-direction: column; gap: 6px; font-size: 0.75rem; }
  .settings-summary div { display: flex; justify-content: space-between; }
  .settings-summary span:first-child { color: #777; }
  .note {
    font-size: 0.7rem;
    line-height: 1.5;
    color: #888;
    background: #1a1626;
    border: 1px solid #2a2040;
    border-radius: 8px;
    padding: 10px;
  }

  .switch { position: relative; display: inline-block; width: 34px; height: 18px; }
  .switch input { opacity: 0; width: 0; height: 0; }
  .slider {
    position: absolute; inset: 0;
    background: #333;
    border-radius: 18px;
    cursor: pointer;
    transition: background 0.2s;
  }
  .slider::before {
    content: '';
    position: absolute;
    width: 14px; height: 14px;
    left: 2px; top: 2px;
    background: #fff;
    border-radius: 50%;
    transition: transform 0.2s;
  }
  .switch input:checked + .slider { background: #8b5cf6; }
  .switch input:checked + .slider::before { transform: translateX(16px); }
  .switch-label { display: flex; align-items: center; gap: 8px; font-size: 0.75rem; color: #888; }

  .input-area { position: relative; }

  textarea {
    width: 100%;
    min-height: 140px;
    background: #1a1a1a;
    color: #e0e0e0;
    border: 1px solid #2a2a2a;
    border-radius: 10px;
    padding: 14px;
    padding-bottom: 46px;
    font-size: 0.9rem;
    font-family: inherit;
    resize: vertical;
    outline: none;
    transition: border-color 0.2s;
    line-height: 1.5;
  }
  textarea:focus { border-color: #8b5cf6; }
  textarea::placeholder { color: #555; }

  .input-footer {
    position: absolute;
    bottom: 15px;
    left: 14px;
    right: 13px;
    display: flex;
    gap: 8px;
    align-items: center;
  }
  .counter { font-size: 0.72rem; color: #666; flex: 1; }
  .counter.full { color: #ef4444; font-weight: 600; }

  button {
    background: #8b5cf6;
    color: #fff;
    border: none;
    border-radius: 8px;
    padding: 8px 20px;
    font-size: 0.82rem;
    font-weight: 500;
    cursor: pointer;
    transition: background 0.2s, opacity 0.2s;
  }
  button:hover { background: #7c3aed; }
  button:disabled { opacity: 0.5; cursor: not-allowed; }
  button.ghost, button.icon-btn {
    background: #232323;
    color: #aaa;
    border: 1px solid #333;
    padding: 4px 12px;
    font-size: 0.72rem;
  }
  button.ghost:hover, button.icon-btn:hover { background: #2e2e2e; color: #e0e0e0; }

  .status { font-size: 0.78rem; color: #888; min-height: 1.2em; }
  .status .timer { color: #8b5cf6; font-variant-numeric: tabular-nums; }

  .error-banner {
    border: 1px solid #ef4444;
    color: #fca5a5;
    background: #1a1111;
    border-radius: 10px;
    padding: 12px 16px;
    font-size: 0.85rem;
    display: flex;
    justify-content: space-between;
    gap: 12px;
  }
  .hidden { display: none !important; }

  .card {
    background: #1a1a1a;
    border: 1px solid #2a2a2a;
    border-radius: 10px;
    overflow: hidden;
  }
  .card-header {
    padding: 12px 16px;
    display: flex;
    align-items: center;
    justify-content: space-between;
    gap: 8px;
    border-bottom: 1px solid #242424;
  }
  .card-header h3 { font-size: 0.88rem; font-weight: 600; color: #fff; }
  .card-actions { display: flex; gap: 6px; }
  .card-body { padding: 16px; font-size: 0.88rem; line-height: 1.6; white-space: pre-wrap; word-break: break-word; }

  .detail-grid { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; padding: 16px; }
  .detail { font-size: 0.8rem; }
  .detail .value { color: #e0e0e0; margin-top: 2px; word-break: break-word; }
  .detail .value.missing { color: #555; font-style: italic; }

  .empty-state, .loading-state {
    display: flex;
    flex-direction: column;
    align-items: center;
    justify-content: center;
    gap: 12px;
    padding: 80px 16px;
    color: #666;
    font-size: 0.85rem;
    text-align: center;
  }
  .skeleton {
    width: 100%;
    height: 320px;
    border-radius: 10px;
    background: linear-gradient(90deg, #1a1a1a 25%, #222 50%, #1a1a1a 75%);
    background-size: 200% 100%;
    animation: shimmer 1.4s infinite;
  }
  @keyframes shimmer { to { background-position: -200% 0; } }

  .spinner {
    width: 16px; height: 16px;
    border: 2px solid #333;
    border-top-color: #8b5cf6;
    border-radius: 50%;
    animation: spin 0.8s linear infinite;
  }
  @keyframes spin { to { transform: rotate(360deg); } }

  @media (max-width: 767px) {
    .sidebar.open, .params.open { position: absolute; top: 49px; bottom: 0; z-index: 10; }
    .params.open { right: 0; }
    .topbar nav { display: none; }
  }
"""

SHARED_SCRIPT = r"""
  const OPTIONS = /*__OPTIONS__*/;
  const MOBILE_WIDTH = 768;

  const promptEl = document.getElementById('prompt');
  const counterEl = document.getElementById('counter');
  const sendBtn = document.getElementById('send');
  const statusEl = document.getElementById('status');
  const errorEl = document.getElementById('error');
  const errorTextEl = document.getElementById('errorText');
  const outputEl = document.getElementById('output');
  const sidebarEl = document.getElementById('sidebar');
  const paramsEl = document.getElementById('params');
  const historyListEl = document.getElementById('historyList');
  const clearHistoryBtn = document.getElementById('clearHistory');
  const sampleToggleEl = document.getElementById('sampleToggle');
  const styleEl = document.getElementById('styleSelect');
  const sizeEl = document.getElementById('sizeSelect');
  const qualityEl = document.getElementById('qualityToggle');

  const sessionId = 'session-' + Date.now() + '-' + Math.random().toString(36).substring(2, 9);

  const state = {
    params: Object.assign({}, OPTIONS.defaults),
    history: [],
    activeId: null,
    result: null,
    loading: false,
  };

  // ── Timer helper ──
  function createTimer(el) {
    let interval = null;
    return {
      start() {
        const t0 = Date.now();
        clearInterval(interval);
        interval = setInterval(() => {
          const s = ((Date.now() - t0) / 1000).toFixed(1);
          el.innerHTML = '<span class="timer">' + s + 's</span> waiting for the agent...';
        }, 100);
      },
      stop() { clearInterval(interval); interval = null; }
    };
  }
  const timer = createTimer(statusEl);

  // ── Clipboard helper ──
  async function copyToClipboard(text) {
    try {
      if (navigator.clipboard && window.isSecureContext) {
        await navigator.clipboard.writeText(text);
        return true;
      }
      const ta = document.createElement('textarea');
      ta.value = text;
      ta.style.position = 'fixed';
      ta.style.opacity = '0';
      document.body.appendChild(ta);
      ta.select();
      const ok = document.execCommand('copy');
      document.body.removeChild(ta);
      return ok;
    } catch (e) {
      return false;
    }
  }

  function copyButton(getText) {
    const btn = document.createElement('button');
    btn.className = 'ghost';
    btn.textContent = 'Copy';
    btn.addEventListener('click', async () => {
      const text = getText();
      if (!text) return;
      if (await copyToClipboard(text)) {
        btn.textContent = 'Copied!';
        setTimeout(() => btn.textContent = 'Copy', 2000);
      }
    });
    return btn;
  }

  // ── API helpers ──
  async function api(path, options) {
    const res = await fetch(path, Object.assign({
      headers: { 'Content-Type': 'application/json' },
    }, options || {}));
    const data = await res.json();
    if (!res.ok || data.error) throw new Error(data.error || 'HTTP ' + res.status);
    return data;
  }

  function el(tag, className, text) {
    const node = document.createElement(tag);
    if (className) node.className = className;
    if (text !== undefined) node.textContent = text;
    return node;
  }

  function detail(label, value) {
    const box = el('div', 'detail');
    box.appendChild(el('span', 'section-label', label));
    box.appendChild(el('div', value ? 'value' : 'value missing', value || 'N/A'));
    return box;
  }

  // ── Error banner ──
  function showError(message) {
    errorTextEl.textContent = message;
    errorEl.classList.remove('hidden');
  }
  function hideError() { errorEl.classList.add('hidden'); }
  document.getElementById('dismissError').addEventListener('click', hideError);

  // ── Prompt input ──
  function updateCounter() {
    const n = promptEl.value.length;
    counterEl.textContent = n + '/' + OPTIONS.max_chars;
    counterEl.classList.toggle('full', n >= OPTIONS.max_chars);
    sendBtn.disabled = state.loading || !promptEl.value.trim();
  }
  promptEl.maxLength = OPTIONS.max_chars;
  promptEl.addEventListener('input', updateCounter);
  promptEl.addEventListener('keydown', e => {
    if (e.key === 'Enter' && (e.metaKey || e.ctrlKey)) { e.preventDefault(); generate(); }
  });
  sendBtn.addEventListener('click', () => generate());

  document.getElementById('clearForm').addEventListener('click', () => {
    promptEl.value = '';
    state.result = null;
    state.activeId = null;
    hideError();
    statusEl.textContent = '';
    updateCounter();
    renderHistory();
    renderOutput();
  });

  function setLoading(loading) {
    state.loading = loading;
    sendBtn.textContent = loading ? 'Working...' : SEND_LABEL;
    updateCounter();
  }

  // ── Parameters panel ──
  function fillSelect(select, values) {
    select.innerHTML = '';
    values.forEach(v => {
      const opt = document.createElement('option');
      opt.value = v;
      opt.textContent = v;
      select.appendChild(opt);
    });
  }
  fillSelect(styleEl, OPTIONS.styles);
  fillSelect(sizeEl, OPTIONS.sizes);

  function renderParams() {
    styleEl.value = state.params.style;
    sizeEl.value = state.params.size;
    qualityEl.checked = state.params.quality === 'HD';
    document.getElementById('qualityStandard').classList.toggle('on', !qualityEl.checked);
    document.getElementById('qualityHD').classList.toggle('on', qualityEl.checked);
    document.getElementById('currentStyle').textContent = state.params.style;
    document.getElementById('currentSize').textContent = state.params.size;
    document.getElementById('currentQuality').textContent = state.params.quality;
  }
  styleEl.addEventListener('change', () => { state.params.style = styleEl.value; renderParams(); });
  sizeEl.addEventListener('change', () => { state.params.size = sizeEl.value; renderParams(); });
  qualityEl.addEventListener('change', () => {
    state.params.quality = qualityEl.checked ? 'HD' : 'Standard';
    renderParams();
  });

  // ── Panels ──
  document.getElementById('toggleSidebar').addEventListener('click', () => sidebarEl.classList.toggle('open'));
  document.getElementById('closeSidebar').addEventListener('click', () => sidebarEl.classList.remove('open'));
  document.getElementById('toggleParams').addEventListener('click', () => paramsEl.classList.toggle('open'));
  document.getElementById('closeParams').addEventListener('click', () => paramsEl.classList.remove('open'));

  function collapseOnSmallScreens() {
    if (window.innerWidth < MOBILE_WIDTH) {
      sidebarEl.classList.remove('open');
      paramsEl.classList.remove('open');
    }
  }
  window.addEventListener('resize', collapseOnSmallScreens);

  // ── History ──
  function renderHistory() {
    historyListEl.innerHTML = '';
    clearHistoryBtn.classList.toggle('hidden', state.history.length === 0);
    if (state.history.length === 0) {
      historyListEl.appendChild(el('div', 'empty-hint', EMPTY_HISTORY_TEXT));
      return;
    }
    state.history.forEach(item => {
      const btn = el('button', 'history-item' + (item.id === state.activeId ? ' active' : ''));
      btn.appendChild(historyThumb(item));
      const text = el('div', 'history-text');
      text.appendChild(el('p', '', item.prompt));
      const meta = el('div', 'history-meta');
      meta.appendChild(el('span', 'badge', item.style));
      meta.appendChild(el('span', '', new Date(item.timestamp).toLocaleTimeString([], { hour: '2-digit', minute: '2-digit' })));
      text.appendChild(meta);
      btn.appendChild(text);
      btn.addEventListener('click', () => selectHistory(item));
      historyListEl.appendChild(btn);
    });
  }

  function selectHistory(item) {
    promptEl.value = item.prompt;
    state.params = { style: item.style, size: item.size, quality: item.quality };
    state.result = historyResult(item);
    state.activeId = item.id;
    hideError();
    updateCounter();
    renderParams();
    renderHistory();
    renderOutput();
    if (window.innerWidth < MOBILE_WIDTH) sidebarEl.classList.remove('open');
  }

  function applyHistory(data) {
    state.history = Array.isArray(data.history) ? data.history : [];
    sampleToggleEl.checked = !!data.sample_mode;
  }

  async function loadHistory() {
    try {
      applyHistory(await api('/api/history/' + VARIANT));
    } catch (e) {
      state.history = [];
    }
    renderHistory();
  }

  clearHistoryBtn.addEventListener('click', async () => {
    try {
      applyHistory(await api('/api/history/' + VARIANT, { method: 'DELETE' }));
    } catch (e) {
      showError(e.message);
    }
    renderHistory();
  });

  sampleToggleEl.addEventListener('change', async () => {
    try {
      applyHistory(await api('/api/history/' + VARIANT + '/sample', {
        method: 'POST',
        body: JSON.stringify({ enabled: sampleToggleEl.checked }),
      }));
    } catch (e) {
      showError(e.message);
      return;
    }
    const first = state.history[0];
    if (sampleToggleEl.checked && first) {
      selectHistory(first);
      return;
    }
    promptEl.value = '';
    state.result = null;
    state.activeId = null;
    updateCounter();
    renderHistory();
    renderOutput();
  });

  // ── Generation ──
  async function generate() {
    const prompt = promptEl.value.trim();
    if (!prompt || state.loading) return;

    setLoading(true);
    hideError();
    state.result = null;
    outputEl.innerHTML = '';
    outputEl.appendChild(loadingView());
    timer.start();

    try {
      const data = await api(GENERATE_PATH, {
        method: 'POST',
        body: JSON.stringify(Object.assign({ prompt, session_id: sessionId }, state.params)),
      });
      timer.stop();
      state.result = historyResult(data.entry);
      state.history = [data.entry].concat(state.history).slice(0, OPTIONS.history_limit);
      state.activeId = data.entry.id;
      statusEl.innerHTML = 'Completed in <span class="timer">' + data.elapsed + 's</span>';
    } catch (e) {
      timer.stop();
      statusEl.textContent = '';
      showError(e.message || 'An unexpected error occurred. Please try again.');
    } finally {
      setLoading(false);
      renderHistory();
      renderOutput();
    }
  }

  function renderOutput() {
    outputEl.innerHTML = '';
    if (state.result) {
      outputEl.appendChild(resultView(state.result));
    } else if (!state.loading) {
      outputEl.appendChild(emptyView());
    }
  }

  if (window.innerWidth < MOBILE_WIDTH) collapseOnSmallScreens();
  renderParams();
  updateCounter();
  renderOutput();
  loadHistory();
"""

PAGE_SHELL = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>/*__TITLE__*/</title>
<style>
/*__SHARED_STYLE__*/
/*__PAGE_STYLE__*/
</style>
</head>
<body>

<header class="topbar">
  <button id="toggleSidebar" class="icon-btn" title="History">&#9776;</button>
  <h1>AI Image Studio</h1>
  <nav>
    <a href="/" class="/*__NAV_IMAGE__*/">Generate</a>
    <a href="/enhance" class="/*__NAV_ENHANCE__*/">Enhance Prompt</a>
  </nav>
  <div class="spacer"></div>
  <label class="switch-label" for="sampleToggle">Sample data
    <span class="switch"><input type="checkbox" id="sampleToggle"><span class="slider"></span></span>
  </label>
  <button id="toggleParams" class="icon-btn" title="Parameters">&#9881;</button>
</header>

<div class="layout">
  <aside id="sidebar" class="sidebar open">
    <div class="sidebar-inner">
      <div class="panel-header">
        <h2>History</h2>
        <div class="card-actions">
          <button id="clearHistory" class="ghost hidden">Clear all</button>
          <button id="closeSidebar" class="ghost">&larr;</button>
        </div>
      </div>
      <div id="historyList" class="history-list"></div>
    </div>
  </aside>

  <main class="main">
    <div class="main-inner">
      <div class="input-area">
        <textarea id="prompt" placeholder="/*__PLACEHOLDER__*/"></textarea>
        <div class="input-footer">
          <span id="counter" class="counter">0/500</span>
          <button id="clearForm" class="ghost">Clear</button>
          <button id="send" disabled>/*__SEND_LABEL__*/</button>
        </div>
      </div>
      <div id="status" class="status"></div>
      <div id="error" class="error-banner hidden">
        <span id="errorText"></span>
        <button id="dismissError" class="ghost">Dismiss</button>
      </div>
      <div id="output"></div>
    </div>
  </main>

  <aside id="params" class="params open">
    <div class="params-inner">
      <div class="panel-header">
        <h2>Parameters</h2>
        <button id="closeParams" class="ghost">&rarr;</button>
      </div>
      <div class="params-body">
        <div class="field">
          <label for="styleSelect">Style</label>
          <select id="styleSelect"></select>
        </div>
        <div class="field">
          <label for="sizeSelect">Size</label>
          <select id="sizeSelect"></select>
        </div>
        <div class="field">
          <label>Quality</label>
          <div class="quality-switch">
            <span id="qualityStandard">Standard</span>
            <span class="switch"><input type="checkbox" id="qualityToggle"><span class="slider"></span></span>
            <span id="qualityHD">HD</span>
          </div>
        </div>
        <div>
          <span class="section-label">Current settings</span>
          <div class="settings-summary">
            <div><span>Style</span><span id="currentStyle"></span></div>
            <div><span>Size</span><span id="currentSize"></span></div>
            <div><span>Quality</span><span id="currentQuality"></span></div>
          </div>
        </div>
        <div class="note">/*__NOTE__*/</div>
      </div>
    </div>
  </aside>
</div>

<script>
/*__PAGE_SCRIPT__*/
/*__SHARED_SCRIPT__*/
</script>
</body>
</html>
"""

IMAGE_PAGE_STYLE = r"""
  .image-frame {
    position: relative;
    min-height: 400px;
    background: #141414;
    display: flex;
    align-items: center;
    justify-content: center;
  }
  .image-frame.expanded { min-height: 600px; }
  .image-frame img { max-width: 100%; max-height: 480px; display: block; }
  .image-frame.expanded img { max-height: 80vh; }
  .image-overlay {
    position: absolute;
    inset: 0;
    display: flex;
    flex-direction: column;
    align-items: center;
    justify-content: center;
    gap: 12px;
    color: #777;
    font-size: 0.85rem;
    text-align: center;
    padding: 16px;
  }
"""

IMAGE_PAGE_SCRIPT = r"""
  const VARIANT = 'image';
  const GENERATE_PATH = '/api/generate';
  const SEND_LABEL = 'Generate';
  const EMPTY_HISTORY_TEXT = 'No images generated yet. Start creating!';
  let expanded = false;

  function historyResult(item) { return item ? item.result : null; }

  function historyThumb(item) {
    const thumb = el('div', 'history-thumb', '');
    const url = item.result && item.result.image_url;
    if (url) {
      const img = document.createElement('img');
      img.src = url;
      img.alt = '';
      img.onerror = () => { img.style.display = 'none'; thumb.textContent = '▣'; };
      thumb.appendChild(img);
    } else {
      thumb.textContent = '▣';
    }
    return thumb;
  }

  function emptyView() {
    const box = el('div', 'empty-state');
    box.appendChild(el('div', '', 'Describe an image and press Generate (Ctrl/Cmd + Enter).'));
    return box;
  }

  function loadingView() {
    const box = el('div', 'loading-state');
    box.appendChild(el('div', 'skeleton'));
    const row = el('div', 'status');
    row.appendChild(el('div', 'spinner'));
    box.appendChild(row);
    box.appendChild(el('div', '', 'Generating your image...'));
    return box;
  }

  function downloadImage(url) {
    if (!url) return;
    try {
      const link = document.createElement('a');
      link.href = url;
      link.download = 'generated-image-' + Date.now() + '.png';
      link.target = '_blank';
      link.rel = 'noopener noreferrer';
      document.body.appendChild(link);
      link.click();
      document.body.removeChild(link);
    } catch (e) {
      window.open(url, '_blank', 'noopener,noreferrer');
    }
  }

  function resultView(result) {
    const wrap = el('div', 'main-inner');

    const card = el('div', 'card');
    const header = el('div', 'card-header');
    header.appendChild(el('h3', '', 'Generated Image'));
    const actions = el('div', 'card-actions');
    const expandBtn = el('button', 'ghost', expanded ? 'Collapse' : 'Expand');
    const downloadBtn = el('button', 'ghost', 'Download');
    const regenBtn = el('button', 'ghost', 'Regenerate');
    downloadBtn.disabled = !result.image_url;
    regenBtn.disabled = state.loading;
    downloadBtn.addEventListener('click', () => downloadImage(result.image_url));
    regenBtn.addEventListener('click', () => { if (promptEl.value.trim()) generate(); });
    actions.appendChild(expandBtn);
    actions.appendChild(downloadBtn);
    actions.appendChild(regenBtn);
    header.appendChild(actions);
    card.appendChild(header);

    const frame = el('div', 'image-frame' + (expanded ? ' expanded' : ''));
    expandBtn.addEventListener('click', () => {
      expanded = !expanded;
      frame.classList.toggle('expanded', expanded);
      expandBtn.textContent = expanded ? 'Collapse' : 'Expand';
    });
    if (result.image_url) {
      const overlay = el('div', 'image-overlay');
      overlay.appendChild(el('div', 'spinner'));
      overlay.appendChild(el('div', '', 'Loading image...'));
      const img = document.createElement('img');
      img.alt = result.enhanced_prompt || 'Generated image';
      img.onload = () => overlay.remove();
      img.onerror = () => {
        img.style.display = 'none';
        overlay.innerHTML = '';
        overlay.appendChild(el('div', '', 'Image could not be loaded. The URL may have expired.'));
        const again = el('button', 'ghost', 'Generate Again');
        again.addEventListener('click', () => generate());
        overlay.appendChild(again);
      };
      img.src = result.image_url;
      frame.appendChild(img);
      frame.appendChild(overlay);
    } else {
      const overlay = el('div', 'image-overlay');
      overlay.appendChild(el('div', '', 'No image URL returned. Check the enhanced prompt below or try regenerating.'));
      frame.appendChild(overlay);
    }
    card.appendChild(frame);
    wrap.appendChild(card);

    const promptCard = el('div', 'card');
    const promptHeader = el('div', 'card-header');
    promptHeader.appendChild(el('h3', '', 'Enhanced Prompt'));
    promptHeader.appendChild(copyButton(() => result.enhanced_prompt));
    promptCard.appendChild(promptHeader);
    promptCard.appendChild(el('div', 'card-body', result.enhanced_prompt || 'N/A'));
    wrap.appendChild(promptCard);

    const details = el('div', 'card');
    const detailsHeader = el('div', 'card-header');
    detailsHeader.appendChild(el('h3', '', 'Details'));
    details.appendChild(detailsHeader);
    const grid = el('div', 'detail-grid');
    grid.appendChild(detail('Original prompt', result.original_prompt));
    grid.appendChild(detail('Style', result.style));
    grid.appendChild(detail('Metadata', result.generation_metadata));
    grid.appendChild(detail('Settings', state.params.style + ' / ' + state.params.size + ' / ' + state.params.quality));
    details.appendChild(grid);
    wrap.appendChild(details);

    return wrap;
  }
"""

ENHANCE_PAGE_SCRIPT = r"""
  const VARIANT = 'enhance';
  const GENERATE_PATH = '/api/enhance';
  const SEND_LABEL = 'Enhance';
  const EMPTY_HISTORY_TEXT = 'No prompts enhanced yet. Try one!';

  function historyResult(item) {
    if (!item || !item.result) return null;
    return Object.assign({ summary: item.summary || '' }, item.result);
  }

  function historyThumb(item) {
    return el('div', 'history-thumb', '✨');
  }

  function emptyView() {
    const box = el('div', 'empty-state');
    box.appendChild(el('div', '', 'Type a rough image prompt and press Enhance (Ctrl/Cmd + Enter).'));
    return box;
  }

  function loadingView() {
    const box = el('div', 'loading-state');
    box.appendChild(el('div', 'spinner'));
    box.appendChild(el('div', '', 'Enhancing your prompt...'));
    return box;
  }

  function matchOption(values, text) {
    if (!text) return null;
    const lower = text.toLowerCase();
    return values.find(v => lower.indexOf(v.toLowerCase()) !== -1) || null;
  }

  function applySuggestions(result) {
    if (result.enhanced_prompt) promptEl.value = result.enhanced_prompt.slice(0, OPTIONS.max_chars);
    const style = matchOption(OPTIONS.styles, result.style_suggestion);
    const size = matchOption(OPTIONS.sizes, result.size_recommendation);
    if (style) state.params.style = style;
    if (size) state.params.size = size;
    if (result.quality_notes) {
      if (/\bHD\b/.test(result.quality_notes)) state.params.quality = 'HD';
      else if (/standard/i.test(result.quality_notes)) state.params.quality = 'Standard';
    }
    updateCounter();
    renderParams();
  }

  function resultView(result) {
    const wrap = el('div', 'main-inner');

    if (result.summary) {
      const summary = el('div', 'card');
      const header = el('div', 'card-header');
      header.appendChild(el('h3', '', 'Summary'));
      summary.appendChild(header);
      summary.appendChild(el('div', 'card-body', result.summary));
      wrap.appendChild(summary);
    }

    const card = el('div', 'card');
    const header = el('div', 'card-header');
    header.appendChild(el('h3', '', 'Enhanced Prompt'));
    const actions = el('div', 'card-actions');
    actions.appendChild(copyButton(() => result.enhanced_prompt));
    const applyBtn = el('button', 'ghost', 'Apply suggestions');
    applyBtn.disabled = !result.enhanced_prompt;
    applyBtn.addEventListener('click', () => applySuggestions(result));
    actions.appendChild(applyBtn);
    const regenBtn = el('button', 'ghost', 'Regenerate');
    regenBtn.disabled = state.loading;
    regenBtn.addEventListener('click', () => { if (promptEl.value.trim()) generate(); });
    actions.appendChild(regenBtn);
    header.appendChild(actions);
    card.appendChild(header);
    card.appendChild(el('div', 'card-body', result.enhanced_prompt || 'N/A'));
    wrap.appendChild(card);

    const details = el('div', 'card');
    const detailsHeader = el('div', 'card-header');
    detailsHeader.appendChild(el('h3', '', 'Recommendations'));
    details.appendChild(detailsHeader);
    const grid = el('div', 'detail-grid');
    grid.appendChild(detail('Style suggestion', result.style_suggestion));
    grid.appendChild(detail('Size recommendation', result.size_recommendation));
    grid.appendChild(detail('Quality notes', result.quality_notes));
    grid.appendChild(detail('Original prompt', result.original_prompt));
    details.appendChild(grid);
    wrap.appendChild(details);

    return wrap;
  }
"""

IMAGE_PAGE = {
    "title": "AI Image Generator",
    "placeholder": "Describe the image you want to create...",
    "send_label": "Generate",
    "note": "Images are generated with Gemini. Parameters are passed as part of the prompt to guide the style and output.",
    "style": IMAGE_PAGE_STYLE,
    "script": IMAGE_PAGE_SCRIPT,
    "nav": "image",
}

ENHANCE_PAGE = {
    "title": "AI Prompt Enhancer",
    "placeholder": "Type a rough image idea to enhance...",
    "send_label": "Enhance",
    "note": "The agent rewrites your prompt and recommends a style, size and quality. Use Apply suggestions to load them into the form.",
    "style": "",
    "script": ENHANCE_PAGE_SCRIPT,
    "nav": "enhance",
}


def render_page(page, options):
    html = PAGE_SHELL
    replacements = {
        "/*__SHARED_STYLE__*/": SHARED_STYLE,
        "/*__PAGE_STYLE__*/": page["style"],
        "/*__PAGE_SCRIPT__*/": page["script"],
        "/*__SHARED_SCRIPT__*/": SHARED_SCRIPT,
        "/*__TITLE__*/": page["title"],
        "/*__PLACEHOLDER__*/": page["placeholder"],
        "/*__SEND_LABEL__*/": page["send_label"],
        "/*__NOTE__*/": page["note"],
        "/*__NAV_IMAGE__*/": "active" if page["nav"] == "image" else "",
        "/*__NAV_ENHANCE__*/": "active" if page["nav"] == "enhance" else "",
    }
    for marker, value in replacements.items():
        html = html.replace(marker, value)
    return html.replace("/*__OPTIONS__*/", json.dumps(options))
