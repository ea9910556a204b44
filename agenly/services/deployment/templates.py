"""Source templates for generated deployment package files.

Templates use ``string.Template`` ($name placeholders) so the embedded JS,
CSS and PHP braces need no escaping.
"""

import html
import json
from string import Template

WIDGET_HTML = Template("""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>$agent_name_html - Chat Widget</title>
    <style>
        .agenly-widget {
            position: fixed;
            bottom: 20px;
            right: 20px;
            width: 350px;
            height: 500px;
            border-radius: 12px;
            box-shadow: 0 8px 32px rgba(0,0,0,0.1);
            background: white;
            z-index: 10000;
            font-family: $font_family;
            display: none;
        }
        .agenly-widget.open { display: block; }
        .agenly-header {
            background: $primary_color;
            color: white;
            padding: 16px;
            border-radius: 12px 12px 0 0;
            display: flex;
            justify-content: space-between;
            align-items: center;
        }
        .agenly-chat { height: 400px; overflow-y: auto; padding: 16px; }
        .agenly-input { padding: 16px; border-top: 1px solid #eee; }
        .agenly-input input {
            width: 100%;
            padding: 12px;
            border: 1px solid #ddd;
            border-radius: 6px;
            outline: none;
        }
        .agenly-toggle {
            position: fixed;
            bottom: 20px;
            right: 20px;
            width: 60px;
            height: 60px;
            border-radius: 50%;
            background: $primary_color;
            color: white;
            border: none;
            cursor: pointer;
            box-shadow: 0 4px 16px rgba(0,0,0,0.2);
            z-index: 10001;
        }
    </style>
</head>
<body>
    <button class="agenly-toggle" onclick="toggleWidget()">&#128172;</button>
    <div class="agenly-widget" id="agenlyWidget">
        <div class="agenly-header">
            <h3>$agent_name_html</h3>
            <button onclick="toggleWidget()" style="background:none;border:none;color:white;cursor:pointer;">&#10005;</button>
        </div>
        <div class="agenly-chat" id="agenlyChat">
            <div class="message agent"><strong>$agent_name_html:</strong> Hello! How can I help you today?</div>
        </div>
        <div class="agenly-input">
            <input type="text" id="agenlyInput" placeholder="Type your message..." onkeypress="handleKeyPress(event)">
        </div>
    </div>

    <script>
        const AGENT_ID = '$agent_id';
        const API_URL = '$api_url';
        const AGENT_LABEL = $agent_label_js;

        function toggleWidget() {
            document.getElementById('agenlyWidget').classList.toggle('open');
        }

        function handleKeyPress(event) {
            if (event.key === 'Enter') {
                sendMessage();
            }
        }

        async function sendMessage() {
            const input = document.getElementById('agenlyInput');
            const message = input.value.trim();
            if (!message) return;

            const chat = document.getElementById('agenlyChat');
            chat.innerHTML += `<div class="message user"><strong>You:</strong> $${message}</div>`;
            input.value = '';

            try {
                const response = await fetch(`$${API_URL}/chat`, {
                    method: 'POST',
                    headers: { 'Content-Type': 'application/json' },
                    body: JSON.stringify({
                        message: message,
                        agentId: AGENT_ID,
                        userId: 'widget-user-' + Date.now()
                    })
                });
                const data = await response.json();
                chat.innerHTML += `<div class="message agent"><strong>$${AGENT_LABEL}:</strong> $${data.data.message}</div>`;
                chat.scrollTop = chat.scrollHeight;
            } catch (error) {
                chat.innerHTML += `<div class="message error">Error: could not reach the assistant</div>`;
            }
        }
    </script>
</body>
</html>
""")

EMBED_SNIPPET = Template("""<!-- AI agent $agent_name_html -->
<script>
(function() {
    const script = document.createElement('script');
    script.src = '$app_url/widget/$agent_id.js';
    script.async = true;
    document.head.appendChild(script);
})();
</script>
""")

EXAMPLE_USAGE_JS = Template("""// Example usage of the $agent_name_comment API

const API_URL = '$api_url';
const AGENT_ID = '$agent_id';

async function sendMessage(message, userId) {
    const response = await fetch(`$${API_URL}/chat`, {
        method: 'POST',
        headers: {
            'Content-Type': 'application/json',
            'Authorization': 'Bearer YOUR_API_KEY'
        },
        body: JSON.stringify({
            message: message,
            agentId: AGENT_ID,
            userId: userId
        })
    });
    const data = await response.json();
    return data.data.message;
}

sendMessage('Hello!', 'user123').then(reply => console.log('Reply:', reply));
""")

WORDPRESS_PLUGIN = Template("""<?php
/**
 * Plugin Name: $agent_name_comment Chat
 * Plugin URI: https://agenly.com
 * Description: AI agent $agent_name_comment for WordPress
 * Version: 1.0.0
 * Author: AGENLY
 * License: GPL v2 or later
 */

if (!defined('ABSPATH')) {
    exit;
}

define('AGENLY_AGENT_ID', '$agent_id');
define('AGENLY_API_URL', '$api_url');

function agenly_enqueue_scripts() {
    wp_enqueue_script('agenly-widget', plugin_dir_url(__FILE__) . 'js/widget.js', array('jquery'), '1.0.0', true);
    wp_enqueue_style('agenly-widget', plugin_dir_url(__FILE__) . 'css/widget.css', array(), '1.0.0');

    wp_localize_script('agenly-widget', 'agenlyConfig', array(
        'agentId' => AGENLY_AGENT_ID,
        'apiUrl' => AGENLY_API_URL,
        'agentName' => $agent_name_php
    ));
}
add_action('wp_enqueue_scripts', 'agenly_enqueue_scripts');

function agenly_add_widget() {
    echo '<div id="agenly-chat-widget"></div>';
}
add_action('wp_footer', 'agenly_add_widget');
""")

REACT_NATIVE_SDK = Template("""import React, { useState } from 'react';
import { View, Text, TextInput, TouchableOpacity, ScrollView, StyleSheet } from 'react-native';

const AGENLY_API_URL = '$api_url';
const AGENT_ID = '$agent_id';

export const AgenlyChat = ({ userId, style }) => {
    const [messages, setMessages] = useState([]);
    const [inputText, setInputText] = useState('');
    const [isLoading, setIsLoading] = useState(false);

    const sendMessage = async () => {
        if (!inputText.trim()) return;

        setMessages(prev => [...prev, { text: inputText, sender: 'user' }]);
        setInputText('');
        setIsLoading(true);

        try {
            const response = await fetch(`$${AGENLY_API_URL}/chat`, {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({ message: inputText, agentId: AGENT_ID, userId: userId })
            });
            const data = await response.json();
            setMessages(prev => [...prev, { text: data.data.message, sender: 'agent' }]);
        } finally {
            setIsLoading(false);
        }
    };

    return (
        <View style={[styles.container, style]}>
            <ScrollView style={styles.messages}>
                {messages.map((msg, index) => (
                    <View key={index} style={[styles.message, msg.sender === 'user' ? styles.userMessage : styles.agentMessage]}>
                        <Text>{msg.text}</Text>
                    </View>
                ))}
                {isLoading && <Text style={styles.loading}>{$agent_name_js} is typing...</Text>}
            </ScrollView>
            <View style={styles.inputContainer}>
                <TextInput
                    style={styles.input}
                    value={inputText}
                    onChangeText={setInputText}
                    placeholder="Type your message..."
                    onSubmitEditing={sendMessage}
                />
                <TouchableOpacity style={styles.sendButton} onPress={sendMessage}>
                    <Text style={styles.sendButtonText}>Send</Text>
                </TouchableOpacity>
            </View>
        </View>
    );
};

const styles = StyleSheet.create({
    container: { flex: 1, backgroundColor: '#f5f5f5' },
    messages: { flex: 1, padding: 16 },
    message: { padding: 12, marginVertical: 4, borderRadius: 8, maxWidth: '80%' },
    userMessage: { backgroundColor: '$primary_color', alignSelf: 'flex-end' },
    agentMessage: { backgroundColor: 'white', alignSelf: 'flex-start' },
    loading: { fontStyle: 'italic', color: '#666', textAlign: 'center', padding: 8 },
    inputContainer: { flexDirection: 'row', padding: 16, backgroundColor: 'white' },
    input: { flex: 1, borderWidth: 1, borderColor: '#ddd', borderRadius: 6, padding: 12, marginRight: 8 },
    sendButton: { backgroundColor: '$primary_color', paddingHorizontal: 16, paddingVertical: 12, borderRadius: 6 },
    sendButtonText: { color: 'white', fontWeight: 'bold' }
});

export default AgenlyChat;
""")

FLUTTER_SDK = Template("""import 'dart:convert';
import 'package:http/http.dart' as http;

const String agenlyApiUrl = '$api_url';
const String agentId = '$agent_id';

/// Minimal client for the $agent_name_comment agent.
class AgenlyChatClient {
  AgenlyChatClient({required this.userId});

  final String userId;

  Future<String> send(String message) async {
    final response = await http.post(
      Uri.parse('$$agenlyApiUrl/chat'),
      headers: {'Content-Type': 'application/json'},
      body: jsonEncode({'message': message, 'agentId': agentId, 'userId': userId}),
    );
    final data = jsonDecode(response.body) as Map<String, dynamic>;
    return (data['data'] as Map<String, dynamic>)['message'] as String;
  }
}
""")

DOCKERFILE = Template("""FROM node:18-alpine

WORKDIR /app

COPY package*.json ./
RUN npm ci --only=production

COPY . .

EXPOSE 3000

ENV NODE_ENV=production
ENV AGENT_ID=$agent_id
ENV API_URL=$api_url

CMD ["npm", "start"]
""")

DOCKER_COMPOSE = Template("""version: '3.8'

services:
  agenly-agent:
    build: .
    ports:
      - "3000:3000"
    environment:
      - NODE_ENV=production
      - AGENT_ID=$agent_id
      - API_URL=$api_url
    restart: unless-stopped
    healthcheck:
      test: ["CMD", "curl", "-f", "http://localhost:3000/health"]
      interval: 30s
      timeout: 10s
      retries: 3

  nginx:
    image: nginx:alpine
    ports:
      - "80:80"
      - "443:443"
    volumes:
      - ./nginx.conf:/etc/nginx/nginx.conf
      - ./ssl:/etc/nginx/ssl
    depends_on:
      - agenly-agent
    restart: unless-stopped
""")

INSTALLATION = {
    "embed": """# Installing the Web Widget

## Option 1: embed snippet
1. Copy the snippet from embed-code.html
2. Paste it into the <head> of your site
3. The widget appears in the bottom-right corner

## Option 2: manual integration
1. Download widget.html
2. Merge its content into your page
3. Adjust the CSS to taste
""",
    "api": Template("""# Installing the API

## Configuration
1. Get your API key from the AGENLY dashboard
2. Base URL: $api_url
3. See api-documentation.json for the full contract

## Examples
- example-usage.js
- Support: $support_contact
"""),
    "plugin": """# Installing the Plugin

## WordPress
1. Download agenly-chat.php
2. Upload it to /wp-content/plugins/
3. Activate the plugin in the WordPress admin

## Shopify, HubSpot, Salesforce
1. Open the platform's app marketplace
2. Search for "AGENLY Chat"
3. Install and paste the manifest values from the package
""",
    "sdk": """# Installing the SDK

## React Native
1. npm install agenly-chat-sdk
2. import { AgenlyChat } from 'agenly-chat-sdk'
3. <AgenlyChat userId="user123" />

## Flutter
1. Add to pubspec.yaml: agenly_chat: ^1.0.0
2. import 'package:agenly_chat/agenly_chat.dart'
3. Use AgenlyChatClient
""",
    "container": """# Installing with Docker

## Single host
1. docker-compose up -d
2. Open http://localhost:3000
3. Point your domain at nginx.conf

## Kubernetes
1. helm install agenly-agent ./helm-chart
2. Configure the ingress
3. kubectl apply -f k8s/
""",
}


def js_string(value: str) -> str:
    """Quoted JS/Dart literal that is also safe inside an inline <script>."""
    return json.dumps(value).replace("</", "<\\/")


def php_string(value: str) -> str:
    """Single-quoted PHP literal, so ``$`` is never interpolated."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def comment_text(value: str) -> str:
    # one line, and never closes a /* */ block
    return " ".join(value.split()).replace("*/", "* /")


def name_values(agent_name: str) -> dict[str, str]:
    """The agent name escaped for every place templates put it."""
    return {
        "agent_name_html": html.escape(agent_name),
        "agent_name_js": js_string(agent_name),
        "agent_label_js": js_string(html.escape(agent_name)),
        "agent_name_php": php_string(agent_name),
        "agent_name_comment": comment_text(agent_name),
    }


def render_openapi(agent_name: str, api_url: str) -> str:
    """OpenAPI 3.0 document for the agent's /chat endpoint."""
    doc = {
        "openapi": "3.0.0",
        "info": {
            "title": f"{agent_name} API",
            "description": f"API for talking to the AI agent {agent_name}",
            "version": "1.0.0",
        },
        "servers": [{"url": api_url, "description": "Production server"}],
        "paths": {
            "/chat": {
                "post": {
                    "summary": "Send a message to the agent",
                    "requestBody": {
                        "required": True,
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "object",
                                    "properties": {
                                        "message": {"type": "string"},
                                        "agentId": {"type": "string"},
                                        "userId": {"type": "string"},
                                        "conversationId": {"type": "string"},
                                    },
                                    "required": ["message", "agentId", "userId"],
                                }
                            }
                        },
                    },
                    "responses": {
                        "200": {
                            "description": "Agent reply",
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {
                                            "success": {"type": "boolean"},
                                            "data": {
                                                "type": "object",
                                                "properties": {
                                                    "message": {"type": "string"},
                                                    "conversationId": {"type": "string"},
                                                },
                                            },
                                        },
                                    }
                                }
                            },
                        }
                    },
                }
            }
        },
    }
    return json.dumps(doc, indent=2)


def render_app_manifest(platform_name: str, agent_name: str, agent_id: str, api_url: str) -> str:
    """Manifest for marketplace-style plugin platforms."""
    manifest = {
        "name": f"{agent_name} Chat",
        "platform": platform_name,
        "vendor": "AGENLY",
        "version": "1.0.0",
        "agentId": agent_id,
        "apiUrl": api_url,
        "scopes": ["chat"],
    }
    return json.dumps(manifest, indent=2)
